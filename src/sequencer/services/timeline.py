"""
Timeline

Owns every sequence of one document and drives them together. Each call to
set_time() is one frame: every non-empty sequence is asked to apply its state
and the result says which targets changed (and therefore need a new solution).
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Hashable, Iterator, List, Optional, TYPE_CHECKING

from sequencer.engine.sequence import CameraSequence, ComponentSequence, Sequence
from sequencer.models.enums import ErrorPolicy, LogCategory
from sequencer.models.errors import SequencerError
from sequencer.models.keyframe import Keyframe
from sequencer.utils.logger import get_category_logger

if TYPE_CHECKING:
    from sequencer.models.document import Document

log = get_category_logger(LogCategory.TIMELINE)


@dataclass
class FrameResult:
    """Outcome of applying one time to all sequences."""
    time: float
    changed: List[Sequence] = field(default_factory=list)
    failed: Dict[Hashable, SequencerError] = field(default_factory=dict)

    @property
    def any_changed(self) -> bool:
        return bool(self.changed)

    @property
    def changed_names(self) -> List[str]:
        return [seq.name for seq in self.changed]


class Timeline:
    """
    Collection of sequences for one document.

    Example:
        timeline = Timeline(doc)
        timeline.add_keyframe(slider.instance_id, ComponentKeyframe(0.0, {"value": 0}))
        timeline.add_keyframe(slider.instance_id, ComponentKeyframe(2.0, {"value": 10}))

        result = timeline.set_time(1.0)
        result.changed_names  # ["Slider"]
    """

    def __init__(self, document: Optional["Document"] = None, error_policy: ErrorPolicy = ErrorPolicy.SKIP):
        self.document = document
        self.error_policy = error_policy
        self.camera: Optional[CameraSequence] = None
        self._sequences: Dict[Hashable, ComponentSequence] = {}

    # ------------------------------------------------------------
    # Sequence management
    # ------------------------------------------------------------

    def add_sequence(self, sequence: ComponentSequence) -> ComponentSequence:
        """Register a sequence, replacing any sequence for the same target."""
        if sequence.document is None:
            sequence.document = self.document
        self._sequences[sequence.target_id] = sequence
        return sequence

    def get_sequence(self, target_id: Hashable) -> Optional[ComponentSequence]:
        return self._sequences.get(target_id)

    def sequence_for(self, target_id: Hashable) -> ComponentSequence:
        """Get the sequence for target_id, creating it on first use."""
        sequence = self._sequences.get(target_id)
        if sequence is None:
            sequence = self.add_sequence(ComponentSequence(target_id, self.document))
            log.debug("Sequence created", target_id=target_id)
        return sequence

    def remove_sequence(self, target_id: Hashable) -> Optional[ComponentSequence]:
        return self._sequences.pop(target_id, None)

    def retarget(self, old_id: Hashable, new_id: Hashable) -> ComponentSequence:
        """Point the sequence of old_id at a different object, keeping its keyframes."""
        if new_id in self._sequences:
            raise ValueError(f"Target {new_id} already has a sequence")
        sequence = self._sequences.pop(old_id)
        sequence.target_id = new_id
        self._sequences[new_id] = sequence
        return sequence

    def add_keyframe(self, target_id: Hashable, keyframe: Keyframe) -> ComponentSequence:
        sequence = self.sequence_for(target_id)
        sequence.add_keyframe(keyframe)
        return sequence

    def rebind(self, document: Optional["Document"]) -> None:
        """Switch every sequence to another document (e.g. after a reload)."""
        self.document = document
        for sequence in self._sequences.values():
            sequence.document = document
        log.info("Timeline rebound", sequences=len(self._sequences))

    @property
    def sequences(self) -> List[Sequence]:
        """Component sequences followed by the camera sequence, if any."""
        result: List[Sequence] = list(self._sequences.values())
        if self.camera is not None:
            result.append(self.camera)
        return result

    def __len__(self) -> int:
        return len(self.sequences)

    def __iter__(self) -> Iterator[Sequence]:
        return iter(self.sequences)

    # ------------------------------------------------------------
    # Time range
    # ------------------------------------------------------------

    def _keyframe_times(self) -> List[float]:
        return [kf.time for seq in self.sequences for kf in seq.keyframes]

    @property
    def start_time(self) -> Optional[float]:
        times = self._keyframe_times()
        return min(times) if times else None

    @property
    def end_time(self) -> Optional[float]:
        times = self._keyframe_times()
        return max(times) if times else None

    @property
    def duration(self) -> float:
        if self.start_time is None:
            return 0.0
        return self.end_time - self.start_time

    # ------------------------------------------------------------
    # Frame application
    # ------------------------------------------------------------

    def set_time(self, time: float, document: Optional["Document"] = None) -> FrameResult:
        """
        Apply `time` to every non-empty sequence.

        Args:
            time: Clock time
            document: Document to apply to (defaults to the bound one, and
                becomes the bound one when given)

        Returns:
            FrameResult listing changed and failed sequences

        Raises:
            SequencerError: A sequence failed and error_policy is RAISE
        """
        if document is not None:
            self.document = document

        result = FrameResult(time=time)
        for sequence in self.sequences:
            if sequence.is_empty:
                continue

            try:
                if sequence.set_time(time, self.document):
                    result.changed.append(sequence)
            except SequencerError as ex:
                if self.error_policy == ErrorPolicy.RAISE:
                    raise
                key = getattr(sequence, "target_id", sequence.name)
                result.failed[key] = ex
                log.error(
                    "Sequence failed, skipped",
                    sequence=key,
                    time=time,
                    error=str(ex),
                    error_type=type(ex).__name__
                )

        log.debug("Frame applied", time=time, changed=len(result.changed), failed=len(result.failed))
        return result
