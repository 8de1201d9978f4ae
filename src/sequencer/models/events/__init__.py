"""
Event system for the sequencer

Events are published on the EventBus by Timeline consumers and the player.
"""

from sequencer.models.events.types import EventType
from sequencer.models.events.base import Event
from sequencer.models.events.sources import EventSource
from sequencer.models.events.timeline_events import (
    SequenceChangedEvent,
    SequenceFailedEvent,
    TimelineFrameEvent,
    PlaybackStateChangedEvent,
)

__all__ = [
    "EventType",
    "Event",
    "EventSource",
    "SequenceChangedEvent",
    "SequenceFailedEvent",
    "TimelineFrameEvent",
    "PlaybackStateChangedEvent",
]
