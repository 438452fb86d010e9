"""Number helpers shared by the SVG and CSS builders."""
from __future__ import annotations

import math
from typing import Union

from visit_counter.constants import DEFAULT_HEIGHT, LOGO_SCALE_SHORT, LOGO_SCALE_TALL

Number = Union[int, float]


def round_half_up(value: float) -> int:
    """Round half away from zero (round() in Python rounds half to even)."""
    if value < 0:
        return -int(math.floor(-value + 0.5))
    return int(math.floor(value + 0.5))


def fmt_num(value: Number) -> str:
    """Format a number without a trailing '.0' (148.0 -> '148', 0.5 -> '0.5')."""
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def logo_size(height: int) -> int:
    """Square logo edge in px for a badge of the given height."""
    scale = LOGO_SCALE_TALL if height > DEFAULT_HEIGHT else LOGO_SCALE_SHORT
    return round_half_up(height * scale)


def logo_margin(height: int) -> int:
    """Vertical gap above the logo that centers it in the badge."""
    return max(0, height - logo_size(height)) // 2
