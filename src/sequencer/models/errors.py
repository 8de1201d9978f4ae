"""
Sequencer exceptions

All errors raised by the engine derive from SequencerError so callers driving
a batch of sequences can catch one type.
"""

from typing import Any


class SequencerError(Exception):
    """Base class for all sequencer errors"""


class TargetNotFoundError(SequencerError, KeyError):
    """Target id of a sequence cannot be resolved in the current document."""

    def __init__(self, target_id: Any):
        self.target_id = target_id
        super().__init__(f"Unable to find document object to restore state ({target_id})")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return self.args[0]


class PreconditionViolation(SequencerError):
    """Operation called in a state where it cannot produce a result (e.g. empty sequence)."""


class InvariantViolation(SequencerError):
    """Internal invariant broken (duplicate keyframe times, fraction out of range)."""


class ConfigError(SequencerError):
    """Configuration file missing or invalid and no usable fallback."""
