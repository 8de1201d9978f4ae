"""
Enums for the keyframe sequencer
"""

from enum import Enum, auto


class ObjectPhase(Enum):
    """
    Solution phase of a document object

    BLANK: Object was never solved (or was just reset), expiring it is pointless
    COMPUTED: Object holds a valid solution
    FAILED: Last solution raised an error
    """
    BLANK = auto()
    COMPUTED = auto()
    FAILED = auto()


class SequenceKind(Enum):
    """Sequence variants"""
    COMPONENT = auto()   # Drives the values of one document object
    CAMERA = auto()      # Drives the viewport camera (not implemented)


class ErrorPolicy(Enum):
    """What Timeline does when a single sequence fails to apply"""
    RAISE = auto()   # Propagate to caller, abort the frame
    SKIP = auto()    # Log, record failure, continue with next sequence


class PlaybackState(Enum):
    """Player state"""
    STOPPED = auto()
    PLAYING = auto()
    PAUSED = auto()


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class LogCategory(Enum):
    """Log categories for grouping related events"""
    CONFIG = auto()      # Configuration loading, validation
    SEQUENCE = auto()    # Target resolution, state application
    KEYFRAME = auto()    # Keyframe insertion, replacement
    TIMELINE = auto()    # Batch time changes over all sequences
    PLAYBACK = auto()    # Virtual clock, play/pause/stop
    DOCUMENT = auto()    # Host document objects
    EVENT = auto()       # Event bus events and handling
    SYSTEM = auto()      # Startup, shutdown, errors

    GENERAL = auto()    # Default general category
