"""Animation timing curves evaluated at discrete frame times."""
from __future__ import annotations


def clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def lerp(a: float, b: float, t: float) -> float:
    """Blend from ``a`` to ``b``; ``t`` is clamped so the result never leaves [a, b]."""
    return a + (b - a) * clamp01(t)


def ease_out_cubic(t: float) -> float:
    """Decelerating curve ``1 - (1 - t)^3`` over the clamped unit interval."""
    inv = 1.0 - clamp01(t)
    return 1.0 - inv * inv * inv


def fade_in(t: float, start: float, duration: float) -> float:
    """0 before ``start``, linear ramp to 1 over ``duration``, then 1.

    A zero ``duration`` is a hard cut at ``start``.
    """
    if duration < 0:
        raise ValueError(f"fade duration must be >= 0, got {duration}")
    if t < start:
        return 0.0
    if duration == 0:
        return 1.0
    return clamp01((t - start) / duration)


def fade_out(t: float, start: float, duration: float) -> float:
    """1 before ``start``, linear ramp to 0 over ``duration``, then 0."""
    if duration < 0:
        raise ValueError(f"fade duration must be >= 0, got {duration}")
    if t < start:
        return 1.0
    if duration == 0:
        return 0.0
    return clamp01(1.0 - (t - start) / duration)


def envelope(*factors: float) -> float:
    """Multiply opacity factors, clamping each one to [0, 1] first."""
    result = 1.0
    for factor in factors:
        result *= clamp01(factor)
    return result


__all__ = ["clamp01", "lerp", "ease_out_cubic", "fade_in", "fade_out", "envelope"]
