"""Shared utility helpers used across boxing-universe modules.

Small clamping / validation primitives shared by the engines.
"""

from __future__ import annotations

from boxing_universe.constants import MAX_ATTRIBUTE, MIN_ATTRIBUTE


def clamp_int(value: int, minimum: int, maximum: int) -> int:
    """Clamp *value* to the inclusive ``[minimum, maximum]`` range."""
    return max(minimum, min(maximum, int(value)))


def clamp_float(value: float, minimum: float, maximum: float) -> float:
    """Clamp *value* to the inclusive ``[minimum, maximum]`` range."""
    return max(minimum, min(maximum, float(value)))


def clamp_attribute(value: float) -> float:
    """Clamp a fighter skill to the ``[30, 99]`` attribute domain."""
    return max(MIN_ATTRIBUTE, min(MAX_ATTRIBUTE, float(value)))


def clamp_probability(value: object, default: float) -> float:
    """Parse *value* as a float and clamp it to ``[0.0, 1.0]``.

    Returns *default* (also clamped) if *value* cannot be converted.
    """
    try:
        numeric = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return max(0.0, min(1.0, default))
    return max(0.0, min(1.0, numeric))


def weighted_choice(options: list[tuple[str, float]], roll: float) -> str:
    """Pick a label from ``(label, weight)`` pairs using a ``[0, 1)`` *roll*."""
    total = sum(max(0.0, weight) for _, weight in options)
    if total <= 0.0:
        return options[0][0]
    remaining = roll * total
    for label, weight in options:
        remaining -= max(0.0, weight)
        if remaining <= 0.0:
            return label
    return options[-1][0]
