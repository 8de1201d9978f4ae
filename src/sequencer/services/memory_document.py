"""
In-memory host document

Stand-in for a real host application: objects with named values, a solution
phase and an expire log. Used by tests and demos, and as the reference for
what a host adapter has to provide.
"""

from __future__ import annotations
import uuid
from typing import Any, Dict, Hashable, Iterator, List, Optional

from sequencer.models.enums import LogCategory, ObjectPhase
from sequencer.utils.logger import get_category_logger

log = get_category_logger(LogCategory.DOCUMENT)


class MemoryObject:
    """
    Document object holding named values.

    expire_solution() does not compute anything; it records the request and
    moves the object back to BLANK until the host marks it solved again.
    """

    def __init__(
        self,
        name: str,
        values: Optional[Dict[str, Any]] = None,
        instance_id: Optional[Hashable] = None,
        phase: ObjectPhase = ObjectPhase.COMPUTED,
        is_active: bool = True,
    ):
        self._instance_id = instance_id if instance_id is not None else uuid.uuid4()
        self._name = name
        self._values: Dict[str, Any] = dict(values or {})
        self.phase = phase
        self.is_active = is_active
        self.expire_count = 0
        self.expire_log: List[bool] = []

    @property
    def instance_id(self) -> Hashable:
        return self._instance_id

    @property
    def name(self) -> str:
        return self._name

    def get_value(self, name: str) -> Any:
        return self._values[name]

    def set_value(self, name: str, value: Any) -> None:
        self._values[name] = value

    def values(self) -> Dict[str, Any]:
        return dict(self._values)

    def expire_solution(self, recompute: bool) -> None:
        self.expire_count += 1
        self.expire_log.append(recompute)
        self.phase = ObjectPhase.BLANK

    def mark_solved(self) -> None:
        self.phase = ObjectPhase.COMPUTED

    def __repr__(self) -> str:
        return f"MemoryObject({self._name!r}, phase={self.phase.name}, values={self._values})"


class MemoryDocument:
    """Document resolving MemoryObjects by instance id."""

    def __init__(self, name: str = "untitled"):
        self.name = name
        self._objects: Dict[Hashable, MemoryObject] = {}

    def add_object(self, obj: MemoryObject) -> MemoryObject:
        if obj.instance_id in self._objects:
            raise ValueError(f"Duplicate instance id: {obj.instance_id}")
        self._objects[obj.instance_id] = obj
        log.debug("Object added", document=self.name, name=obj.name)
        return obj

    def remove_object(self, instance_id: Hashable) -> Optional[MemoryObject]:
        return self._objects.pop(instance_id, None)

    def find_object(self, instance_id: Hashable) -> Optional[MemoryObject]:
        return self._objects.get(instance_id)

    def solve(self) -> None:
        """Mark every object solved (what a host solution pass would do)."""
        for obj in self._objects.values():
            obj.mark_solved()

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[MemoryObject]:
        return iter(list(self._objects.values()))
