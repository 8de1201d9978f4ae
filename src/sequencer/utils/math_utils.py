"""Numeric helpers for keyframe interpolation"""


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def remap(value: float, from_min: float, from_max: float, to_min: float, to_max: float) -> float:
    """
    Linearly map value from [from_min, from_max] onto [to_min, to_max].

    The input is clamped to the source range first, so the result never leaves
    the target range.

    Args:
        value: Value to map
        from_min: Source range start
        from_max: Source range end (must differ from from_min)
        to_min: Target range start
        to_max: Target range end

    Returns:
        Mapped value

    Example:
        remap(5.0, 0.0, 10.0, 0.0, 1.0)  # 0.5
        remap(15.0, 0.0, 10.0, 0.0, 1.0)  # 1.0 (clamped)
    """
    if from_max == from_min:
        raise ValueError(f"Degenerate source range [{from_min}, {from_max}]")

    lower, upper = min(from_min, from_max), max(from_min, from_max)
    value = clamp(value, lower, upper)
    t = (value - from_min) / (from_max - from_min)
    return to_min + t * (to_max - to_min)


def lerp(start: float, end: float, fraction: float) -> float:
    """Linear interpolation between start and end (fraction 0 → start, 1 → end)."""
    return start + (end - start) * fraction
