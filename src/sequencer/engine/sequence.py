"""
Sequences

A sequence is one animatable track: the keyframes driving a single target.
ComponentSequence implements the time query protocol:

    set_time(t) → resolve target → pick bracketing keyframes →
    load/interpolate → compare fingerprint → expire target if changed

The target is never owned. It is looked up by id on first use and the cached
reference is dropped whenever the id or the document changes.
"""

from __future__ import annotations
from typing import Hashable, Iterable, List, Optional, TYPE_CHECKING

from sequencer.engine.keyframe_index import KeyframeIndex
from sequencer.models.enums import LogCategory, ObjectPhase, SequenceKind
from sequencer.models.errors import InvariantViolation, PreconditionViolation, TargetNotFoundError
from sequencer.models.keyframe import Keyframe, NO_STATE
from sequencer.utils.logger import get_category_logger
from sequencer.utils.math_utils import remap

if TYPE_CHECKING:
    from sequencer.models.document import Document, DocumentObject

log = get_category_logger(LogCategory.SEQUENCE)


class Sequence:
    """
    Base class for all sequences

    Subclasses MUST implement:
        name (property)
        set_time(time, document) -> bool
    """

    kind: SequenceKind

    def __init__(self):
        self._index = KeyframeIndex()

    @property
    def name(self) -> str:
        raise NotImplementedError

    # ------------------------------------------------------------
    # Keyframes
    # ------------------------------------------------------------

    @property
    def keyframes(self) -> Iterable[Keyframe]:
        return iter(self._index)

    @property
    def ordered_keyframes(self) -> List[Keyframe]:
        return self._index.ordered_view()

    @property
    def keyframe_count(self) -> int:
        return self._index.count()

    @property
    def is_empty(self) -> bool:
        return self._index.is_empty()

    def add_keyframe(self, keyframe: Keyframe) -> None:
        self._index.insert(keyframe)

    # ------------------------------------------------------------
    # Time
    # ------------------------------------------------------------

    def set_time(self, time: float, document: Optional["Document"]) -> bool:
        """
        Apply the state at `time`.

        Returns:
            True if the externally observable state changed
        """
        raise NotImplementedError


class CameraSequence(Sequence):
    """Viewport camera track. Time application is not implemented yet."""

    kind = SequenceKind.CAMERA

    @property
    def name(self) -> str:
        return "Camera"

    def set_time(self, time: float, document: Optional["Document"]) -> bool:
        return False


class ComponentSequence(Sequence):
    """
    Sequence driving the values of one document object.

    States:
        Unbound     no cached target
        Bound       target resolved, last_state_hash == NO_STATE
        Applied(h)  last applied state had fingerprint h

    Changing target_id or document returns the sequence to Unbound and
    forgets the last fingerprint, so the next set_time always reports a change.

    Example:
        seq = ComponentSequence(slider.instance_id, doc)
        seq.add_keyframe(ComponentKeyframe(0.0, {"value": 0.0}))
        seq.add_keyframe(ComponentKeyframe(10.0, {"value": 100.0}))
        seq.set_time(5.0, doc)  # True, slider value = 50.0, slider expired
        seq.set_time(5.0, doc)  # False, nothing to do
    """

    kind = SequenceKind.COMPONENT

    def __init__(self, target_id: Hashable, document: Optional["Document"] = None):
        super().__init__()
        self._target_id = target_id
        self._document = document
        self._target: Optional["DocumentObject"] = None
        self._last_state_hash: int = NO_STATE

    # ------------------------------------------------------------
    # Target identity / resolution
    # ------------------------------------------------------------

    @property
    def target_id(self) -> Hashable:
        return self._target_id

    @target_id.setter
    def target_id(self, value: Hashable) -> None:
        if value != self._target_id:
            self._target_id = value
            self._unbind()

    @property
    def document(self) -> Optional["Document"]:
        return self._document

    @document.setter
    def document(self, value: Optional["Document"]) -> None:
        if value is not self._document:
            self._document = value
            self._unbind()

    @property
    def target(self) -> "DocumentObject":
        """
        Resolved target object (looked up on first access).

        Raises:
            TargetNotFoundError: No document bound, or the id is not in it
        """
        if self._target is None:
            found = self._document.find_object(self._target_id) if self._document is not None else None
            if found is None:
                raise TargetNotFoundError(self._target_id)
            self._target = found
            log.debug("Target resolved", target_id=self._target_id, name=found.name)
        return self._target

    @property
    def is_bound(self) -> bool:
        return self._target is not None

    @property
    def last_state_hash(self) -> int:
        return self._last_state_hash

    @property
    def name(self) -> str:
        try:
            return self.target.name
        except TargetNotFoundError:
            return "Component"

    def _unbind(self) -> None:
        self._target = None
        self._last_state_hash = NO_STATE

    # ------------------------------------------------------------
    # Time query protocol
    # ------------------------------------------------------------

    def set_time(self, time: float, document: Optional["Document"]) -> bool:
        """
        Handle interpolation of keyframes in this sequence, expiring the target as required.

        Args:
            time: The time to set
            document: The document to apply the time change to

        Returns:
            True if setting the time changed the target's state (and expired it)

        Raises:
            TargetNotFoundError: Target id cannot be resolved in document
            PreconditionViolation: Sequence has no keyframes
        """
        self.document = document
        target = self.target

        ordered = self.ordered_keyframes
        if not ordered:
            raise PreconditionViolation(f"Cannot set time on empty sequence ({self._target_id})")

        old_hash = self._last_state_hash
        try:
            self._last_state_hash = self._apply(time, target, ordered)
        except Exception:
            # Target may hold partially written values; force a change on the next call
            self._last_state_hash = NO_STATE
            raise

        if old_hash == self._last_state_hash:
            return False

        if target.is_active and target.phase != ObjectPhase.BLANK:
            target.expire_solution(False)
            log.debug("Target expired", name=target.name, time=time)
        return True

    @staticmethod
    def _apply(time: float, target: "DocumentObject", ordered: List[Keyframe]) -> int:
        """Apply the acting keyframe(s) for `time` and return the resulting fingerprint."""
        last = len(ordered) - 1
        for i, current in enumerate(ordered):
            next_kf = ordered[i + 1] if i < last else None

            # Past last frame / only one keyframe, or on or before first frame
            if next_kf is None or (i == 0 and current.time >= time):
                return current.load_state(target)

            if next_kf.time <= current.time:
                raise InvariantViolation(f"Keyframes out of order at time {current.time}")

            # Between this frame and next
            if current.time <= time < next_kf.time:
                fraction = remap(time, current.time, next_kf.time, 0.0, 1.0)
                return current.interpolate_state(target, next_kf, fraction)

        raise InvariantViolation(f"No keyframe selected for time {time}")
