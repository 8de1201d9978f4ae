"""
Keyframe models

A keyframe is a timestamped snapshot of target state. It knows how to write
itself onto a target exactly (load_state) or blended toward the following
keyframe (interpolate_state). Both return a fingerprint of the state they
applied; sequences compare fingerprints to decide whether the target changed.
"""

from __future__ import annotations
from typing import Any, Dict, Hashable, Iterable, Optional, TYPE_CHECKING

from sequencer.models.errors import InvariantViolation
from sequencer.utils.math_utils import lerp

if TYPE_CHECKING:
    from sequencer.models.document import DocumentObject

# Fingerprint meaning "no state applied yet". Keyframes never return it.
NO_STATE = -1


class Keyframe:
    """
    Base class for all keyframes

    Subclasses MUST implement:
        load_state(target) -> int
        interpolate_state(target, next_keyframe, fraction) -> int
    """

    def __init__(self, time: float):
        self._time = float(time)

    @property
    def time(self) -> float:
        # Read-only: the index is keyed by time
        return self._time

    def load_state(self, target: "DocumentObject") -> int:
        raise NotImplementedError

    def interpolate_state(self, target: "DocumentObject", next_keyframe: "Keyframe", fraction: float) -> int:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(time={self._time})"


def _is_numeric(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _freeze(value: Any) -> Hashable:
    """Turn containers into hashable equivalents so any value can be fingerprinted."""
    if isinstance(value, dict):
        return frozenset((k, _freeze(v)) for k, v in value.items())
    if isinstance(value, (set, frozenset)):
        return frozenset(_freeze(v) for v in value)
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def state_fingerprint(target_id: Hashable, applied: Dict[str, Any]) -> int:
    """
    Fingerprint of a set of applied values.

    Covers the target id and every (name, value) pair written to the target,
    independent of write order. Uses hash(), so it is stable within one process only.
    """
    fingerprint = hash((target_id, _freeze(applied)))
    return fingerprint if fingerprint != NO_STATE else NO_STATE - 1


class ComponentKeyframe(Keyframe):
    """
    Keyframe holding named values of one document object.

    Interpolation rules:
    - int/float present in both keyframes: linear blend (ints are rounded)
    - anything else (bool, str, lists, missing in next): holds this keyframe's value

    Example:
        kf = ComponentKeyframe(0.0, {"radius": 1.0, "visible": True})
        kf.load_state(circle)
    """

    def __init__(self, time: float, values: Optional[Dict[str, Any]] = None):
        super().__init__(time)
        self.values: Dict[str, Any] = dict(values or {})

    # ------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------

    @classmethod
    def capture(cls, time: float, target: "DocumentObject", names: Optional[Iterable[str]] = None) -> "ComponentKeyframe":
        """Snapshot the target's current values (all of them, or only `names`)."""
        current = target.values()
        if names is not None:
            current = {name: target.get_value(name) for name in names}
        return cls(time, current)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ComponentKeyframe":
        return cls(data["time"], data.get("values", {}))

    def to_dict(self) -> Dict[str, Any]:
        return {"time": self.time, "values": dict(self.values)}

    # ------------------------------------------------------------
    # State application
    # ------------------------------------------------------------

    def load_state(self, target: "DocumentObject") -> int:
        for name, value in self.values.items():
            target.set_value(name, value)
        return state_fingerprint(target.instance_id, self.values)

    def interpolate_state(self, target: "DocumentObject", next_keyframe: Keyframe, fraction: float) -> int:
        if not isinstance(next_keyframe, ComponentKeyframe):
            raise TypeError(f"Cannot interpolate toward {type(next_keyframe).__name__}")
        if not 0.0 <= fraction <= 1.0:
            raise InvariantViolation(f"Interpolation fraction {fraction} outside [0, 1]")

        applied = self.blend(next_keyframe, fraction)
        for name, value in applied.items():
            target.set_value(name, value)
        return state_fingerprint(target.instance_id, applied)

    def blend(self, other: "ComponentKeyframe", fraction: float) -> Dict[str, Any]:
        """Values at `fraction` of the way from this keyframe to `other`."""
        blended = {}
        for name, start in self.values.items():
            end = other.values.get(name)
            if _is_numeric(start) and _is_numeric(end):
                value = lerp(start, end, fraction)
                if isinstance(start, int) and isinstance(end, int):
                    value = int(round(value))
                blended[name] = value
            else:
                blended[name] = start
        return blended

    def __repr__(self) -> str:
        return f"ComponentKeyframe(time={self.time}, values={self.values})"
