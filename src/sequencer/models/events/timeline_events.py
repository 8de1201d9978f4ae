from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable, List, Optional

from sequencer.models.enums import PlaybackState
from sequencer.models.events.base import Event
from sequencer.models.events.sources import EventSource
from sequencer.models.events.types import EventType


@dataclass(init=False)
class SequenceChangedEvent(Event):
    """A sequence applied a state that differs from the previous one."""

    target_id: Optional[Hashable]
    name: str
    time: float

    def __init__(self, target_id: Optional[Hashable], name: str, time: float,
                 source: EventSource = EventSource.TIMELINE):
        super().__init__(type=EventType.SEQUENCE_CHANGED, source=source)
        self.target_id = target_id
        self.name = name
        self.time = time


@dataclass(init=False)
class SequenceFailedEvent(Event):
    """A sequence could not apply its state (skipped by the timeline)."""

    target_id: Optional[Hashable]
    time: float
    error: str

    def __init__(self, target_id: Optional[Hashable], time: float, error: str,
                 source: EventSource = EventSource.TIMELINE):
        super().__init__(type=EventType.SEQUENCE_FAILED, source=source)
        self.target_id = target_id
        self.time = time
        self.error = error


@dataclass(init=False)
class TimelineFrameEvent(Event):
    """The virtual clock moved and all sequences were applied."""

    time: float
    frame: int
    changed: List[str]

    def __init__(self, time: float, frame: int, changed: List[str],
                 source: EventSource = EventSource.PLAYER):
        super().__init__(type=EventType.TIMELINE_FRAME, source=source)
        self.time = time
        self.frame = frame
        self.changed = changed


@dataclass(init=False)
class PlaybackStateChangedEvent(Event):
    old_state: PlaybackState
    new_state: PlaybackState

    def __init__(self, old_state: PlaybackState, new_state: PlaybackState):
        super().__init__(type=EventType.PLAYBACK_STATE_CHANGED, source=EventSource.PLAYER)
        self.old_state = old_state
        self.new_state = new_state
