"""
RenderOptions model: the optional visual parameters accepted by the badge renderer.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional

from visit_counter.constants import DEFAULT_HEIGHT, DEFAULT_LOGO_WIDTH

_INT_FIELDS = frozenset({
    "width", "height", "label_width", "counter_width", "radius", "font_size",
    "label_offset_x", "label_offset_y", "counter_offset_x", "counter_offset_y",
    "border_width", "border_radius", "logo_width",
})
_FLOAT_FIELDS = frozenset({"grad_stop1_opacity", "grad_stop2_opacity", "shadow_opacity"})


@dataclass(frozen=True)
class RenderOptions:
    """Immutable bag of badge customization parameters.

    Every field is optional; None means "use the built-in default". Colors
    are accepted with or without a leading '#'. text_color and
    background_color are deprecated fallbacks for the per-section colors.
    """
    label: Optional[str] = None
    style: Optional[str] = None

    # Dimensions
    width: Optional[int] = None
    height: Optional[int] = None
    label_width: Optional[int] = None
    counter_width: Optional[int] = None
    radius: Optional[int] = None

    # Gradient
    grad_stop1_color: Optional[str] = None
    grad_stop1_opacity: Optional[float] = None
    grad_stop2_opacity: Optional[float] = None

    # Text
    font_family: Optional[str] = None
    font_size: Optional[int] = None
    font_weight: Optional[str] = None
    label_offset_x: Optional[int] = None
    label_offset_y: Optional[int] = None
    counter_offset_x: Optional[int] = None
    counter_offset_y: Optional[int] = None
    shadow_fill: Optional[str] = None
    shadow_opacity: Optional[float] = None

    # Colors
    background_label: Optional[str] = None
    background_counter: Optional[str] = None
    label_color: Optional[str] = None
    counter_color: Optional[str] = None
    text_color: Optional[str] = None
    background_color: Optional[str] = None

    # Border
    border_width: Optional[int] = None
    border_color: Optional[str] = None
    border_radius: Optional[int] = None

    # Logo and layout
    logo_url: Optional[str] = None
    logo_width: Optional[int] = None
    element_positions: Optional[str] = None

    @property
    def has_logo(self) -> bool:
        return bool(self.logo_url)

    @property
    def has_border(self) -> bool:
        return self.border_width is not None and self.border_width > 0

    @property
    def effective_height(self) -> int:
        return self.height if self.height is not None else DEFAULT_HEIGHT

    @property
    def effective_logo_width(self) -> int:
        return self.logo_width if self.logo_width is not None else DEFAULT_LOGO_WIDTH

    def to_dict(self) -> Dict[str, Any]:
        """Return only the fields that are set."""
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}

    @classmethod
    def field_names(cls) -> frozenset:
        return frozenset(f.name for f in fields(cls))

    @classmethod
    def from_mapping(cls, params: Mapping[str, Any]) -> "RenderOptions":
        """Build options from loosely typed input such as URL query parameters.

        Unknown keys are ignored. Numeric fields accept numbers or numeric
        strings; size and offset fields must be non-negative integers.

        Raises:
            ValueError: If a numeric field cannot be parsed
        """
        values: Dict[str, Any] = {}
        for name in cls.field_names():
            if name not in params:
                continue
            raw = params[name]
            if raw is None:
                continue
            if name in _INT_FIELDS:
                values[name] = _parse_unsigned(name, raw)
            elif name in _FLOAT_FIELDS:
                values[name] = _parse_float(name, raw)
            else:
                values[name] = str(raw)
        return cls(**values)


def _parse_unsigned(name: str, raw: Any) -> int:
    if isinstance(raw, bool):
        raise ValueError(f"{name} must be a non-negative integer, got {raw!r}")
    try:
        value = int(str(raw).strip()) if not isinstance(raw, int) else raw
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a non-negative integer, got {raw!r}")
    if value < 0:
        raise ValueError(f"{name} must be a non-negative integer, got {raw!r}")
    return value


def _parse_float(name: str, raw: Any) -> float:
    if isinstance(raw, bool):
        raise ValueError(f"{name} must be a number, got {raw!r}")
    try:
        value = float(str(raw).strip()) if not isinstance(raw, (int, float)) else float(raw)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number, got {raw!r}")
    if not math.isfinite(value):
        raise ValueError(f"{name} must be a finite number, got {raw!r}")
    return value
