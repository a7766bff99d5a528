"""Half-up rounding for reported tonnages (0.605 → 0.61, not 0.6)."""

import math


def round_half_up(value: float, ndigits: int = 2) -> float:
    scale = 10 ** ndigits
    return math.floor(value * scale + 0.5) / scale
