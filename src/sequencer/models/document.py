"""
Host document protocols
=======================
Minimal contract the sequencer needs from the application that owns the
animated objects. Sequences never own documents or objects; they only look
them up by id and ask them to expire.
"""

from __future__ import annotations
from typing import Any, Dict, Hashable, Optional, Protocol, runtime_checkable

from sequencer.models.enums import ObjectPhase


@runtime_checkable
class DocumentObject(Protocol):
    """
    Protocol for one object inside a host document.

    All implementations must provide:
    - instance_id: unique id used by sequences to re-resolve the object
    - name: display name (used as the sequence name)
    - phase: current solution phase
    - is_active: True for objects that take part in solutions
    - get_value / set_value: named state the keyframes read and write
    - expire_solution: ask the host to recompute this object
    """

    @property
    def instance_id(self) -> Hashable:
        ...

    @property
    def name(self) -> str:
        ...

    @property
    def phase(self) -> ObjectPhase:
        ...

    @property
    def is_active(self) -> bool:
        ...

    def get_value(self, name: str) -> Any:
        ...

    def set_value(self, name: str, value: Any) -> None:
        ...

    def values(self) -> Dict[str, Any]:
        """Snapshot of all named values."""
        ...

    def expire_solution(self, recompute: bool) -> None:
        """
        Mark the object (and its dependents) as needing a new solution.

        Args:
            recompute: Start a new solution immediately. Sequences always
                pass False and leave scheduling to the host.
        """
        ...


@runtime_checkable
class Document(Protocol):
    """Protocol for the host document resolving object ids."""

    def find_object(self, instance_id: Hashable) -> Optional[DocumentObject]:
        """Return the object with this id, or None if it no longer exists."""
        ...
