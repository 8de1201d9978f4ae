from enum import Enum, auto


class EventType(Enum):
    # Sequences
    SEQUENCE_CHANGED = auto()
    SEQUENCE_FAILED = auto()

    # Timeline / clock
    TIMELINE_FRAME = auto()
    PLAYBACK_STATE_CHANGED = auto()
