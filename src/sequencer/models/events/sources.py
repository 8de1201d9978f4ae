from enum import Enum, auto


class EventSource(Enum):
    """Event source identifiers"""
    TIMELINE = auto()
    PLAYER = auto()
    APPLICATION = auto()
