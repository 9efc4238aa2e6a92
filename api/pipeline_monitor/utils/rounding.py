from __future__ import annotations
import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards positive infinity.

    Matches JavaScript's ``Math.round`` so percentages agree with the
    dashboard front-end (``round_half_up(12.5) == 13``, ``round_half_up(-12.5) == -12``).
    """
    return int(math.floor(value + 0.5))


def percent(part: float, whole: float) -> int:
    """``part / whole`` as a rounded percentage, 0 when ``whole`` is 0."""
    if not whole:
        return 0
    return round_half_up(part / whole * 100)
