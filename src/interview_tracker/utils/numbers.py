"""Numeric helpers shared by scoring and analytics."""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (2.5 -> 3, 82.5 -> 83)."""
    return int(math.floor(value + 0.5))


def percentage(part: int, whole: int) -> int:
    """Rounded percentage of ``part`` in ``whole``; 0 when ``whole`` is 0."""
    if whole <= 0:
        return 0
    return round_half_up(100 * part / whole)
