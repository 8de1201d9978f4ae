from sequencer.services.event_bus import EventBus
from sequencer.services.memory_document import MemoryDocument, MemoryObject
from sequencer.services.timeline import Timeline, FrameResult
from sequencer.services.player import TimelinePlayer

__all__ = [
    'EventBus',
    'MemoryDocument',
    'MemoryObject',
    'Timeline',
    'FrameResult',
    'TimelinePlayer',
]
