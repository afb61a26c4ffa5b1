"""
Numeric helpers for presenting statistics.
"""
import math


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Round with ties going up (2.5 -> 3), unlike the built-in round().

    Args:
        value: Number to round
        digits: Decimal places to keep

    Returns:
        Rounded value
    """
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def round_to_int(value: float) -> int:
    """Round to the nearest integer, ties going up."""
    return int(math.floor(value + 0.5))
