"""
KeyframeIndex: keyframes of one sequence, unique by time.

Keeps an unordered set of keyframes and a lazily rebuilt time-sorted view.
insert() is the only mutation and the only place the view is invalidated.
"""

from __future__ import annotations
from typing import Dict, Iterator, List, Optional

from sequencer.models.enums import LogCategory
from sequencer.models.keyframe import Keyframe
from sequencer.utils.logger import get_category_logger

log = get_category_logger(LogCategory.KEYFRAME)


class KeyframeIndex:
    """
    Collection of keyframes keyed by time.

    Inserting at an existing time replaces the old keyframe (no merge).
    The ordered view is recomputed on first access after a mutation.

    Not thread-safe: callers serialize insert() against ordered_view().

    Example:
        index = KeyframeIndex()
        index.insert(ComponentKeyframe(10.0, {...}))
        index.insert(ComponentKeyframe(0.0, {...}))
        [k.time for k in index.ordered_view()]  # [0.0, 10.0]
    """

    def __init__(self):
        self._keyframes: Dict[float, Keyframe] = {}
        self._ordered: Optional[List[Keyframe]] = None

    def insert(self, keyframe: Keyframe) -> Optional[Keyframe]:
        """
        Add keyframe, replacing any keyframe at the same time.

        Returns:
            The replaced keyframe, or None
        """
        self._ordered = None
        replaced = self._keyframes.pop(keyframe.time, None)
        self._keyframes[keyframe.time] = keyframe

        if replaced is not None:
            log.debug("Keyframe replaced", time=keyframe.time)
        return replaced

    def ordered_view(self) -> List[Keyframe]:
        """Keyframes sorted ascending by time (cached until next insert)."""
        if self._ordered is None:
            self._ordered = sorted(self._keyframes.values(), key=lambda k: k.time)
        return self._ordered

    def get(self, time: float) -> Optional[Keyframe]:
        return self._keyframes.get(float(time))

    def is_empty(self) -> bool:
        return not self._keyframes

    def count(self) -> int:
        return len(self._keyframes)

    @property
    def is_dirty(self) -> bool:
        """True when the ordered view will be rebuilt on next access."""
        return self._ordered is None

    def __len__(self) -> int:
        return len(self._keyframes)

    def __iter__(self) -> Iterator[Keyframe]:
        # Unordered, like the underlying set
        return iter(list(self._keyframes.values()))

    def __contains__(self, keyframe: object) -> bool:
        return isinstance(keyframe, Keyframe) and self._keyframes.get(keyframe.time) is keyframe
