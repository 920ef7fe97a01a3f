"""Numeric helpers shared by the scorers."""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded toward +inf."""
    return int(math.floor(value + 0.5))


def linear_decay(deviation: float, slope: float) -> float:
    """``max(0, 100 - slope * |deviation|)``."""
    return max(0.0, 100.0 - slope * abs(deviation))
