"""
Keyframe sequencer

Drives the state of host document objects from time-ordered keyframes and
reports which objects actually changed.
"""

from sequencer.engine.keyframe_index import KeyframeIndex
from sequencer.engine.sequence import CameraSequence, ComponentSequence, Sequence
from sequencer.models.enums import ErrorPolicy, ObjectPhase, PlaybackState
from sequencer.models.errors import (
    ConfigError,
    InvariantViolation,
    PreconditionViolation,
    SequencerError,
    TargetNotFoundError,
)
from sequencer.models.keyframe import ComponentKeyframe, Keyframe, NO_STATE
from sequencer.services.timeline import FrameResult, Timeline
from sequencer.services.player import TimelinePlayer

__version__ = "0.1.0"

__all__ = [
    'KeyframeIndex',
    'Sequence',
    'ComponentSequence',
    'CameraSequence',
    'Keyframe',
    'ComponentKeyframe',
    'NO_STATE',
    'Timeline',
    'FrameResult',
    'TimelinePlayer',
    'ErrorPolicy',
    'ObjectPhase',
    'PlaybackState',
    'SequencerError',
    'TargetNotFoundError',
    'PreconditionViolation',
    'InvariantViolation',
    'ConfigError',
]
