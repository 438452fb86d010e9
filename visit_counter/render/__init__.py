"""Stateless badge rendering: CSS from options, SVG from label/count/CSS."""

from ._numbers import logo_margin, logo_size, round_half_up
from .badge import load_base_css, render_badge
from .css import build_custom_css, inner_radius, normalize_color, parse_element_positions
from .svg import generate_svg
from .url import badge_query, build_badge_url

__all__ = [
    "badge_query",
    "build_badge_url",
    "build_custom_css",
    "generate_svg",
    "inner_radius",
    "load_base_css",
    "logo_margin",
    "logo_size",
    "normalize_color",
    "parse_element_positions",
    "render_badge",
    "round_half_up",
]
