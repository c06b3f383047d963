"""Score rounding helpers shared by the heuristics and the fallback synthesis."""

from __future__ import annotations

import math

SCORE_MIN = 0
SCORE_MAX = 100


def round_half_away(value: float) -> int:
    """Round to the nearest integer, ties away from zero (2.5 -> 3, -2.5 -> -3)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def clamp_score(value: float) -> int:
    """Round first, then clamp into [0, 100]."""
    return max(SCORE_MIN, min(SCORE_MAX, round_half_away(value)))
