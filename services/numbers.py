"""Defensive numeric helpers shared by the aggregator and the evaluator."""
import math


def to_number(value, default: float = 0.0) -> float:
    """Coerce ``value`` to a finite float.

    ``None`` yields ``default``; anything non-numeric, NaN or infinite yields 0.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return float(value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def round_to(value, decimals: int = 2) -> float:
    """Round to ``decimals`` places, halves going up (-0.125 -> -0.12, 0.125 -> 0.13)."""
    number = to_number(value)
    factor = 10 ** decimals
    return math.floor(number * factor + 0.5) / factor


def clamp(value: float, minimum: float = 0.0, maximum: float = 100.0) -> float:
    return max(minimum, min(maximum, value))
