"""Compose a complete badge: base stylesheet + custom CSS + SVG skeleton."""
from __future__ import annotations

import functools
import os
from typing import Optional

from visit_counter import metrics
from visit_counter.constants import DEFAULT_HEIGHT, DEFAULT_LABEL, DEFAULT_WIDTH
from visit_counter.models.render_options import RenderOptions

from .css import build_custom_css
from .svg import generate_svg

BASE_CSS_PATH = os.path.join(os.path.dirname(__file__), "style.css")


@functools.lru_cache(maxsize=1)
def load_base_css() -> str:
    with open(BASE_CSS_PATH, "r", encoding="utf-8") as fh:
        return fh.read()


def render_badge(count: int, options: Optional[RenderOptions] = None) -> str:
    """Render the badge SVG for ``count`` with the built-in defaults applied.

    Missing label, width and height fall back to "Visits", 150 and 20.
    """
    css = f"{load_base_css()}\n{build_custom_css(options)}"
    label = options.label if options is not None and options.label is not None else DEFAULT_LABEL
    width = options.width if options is not None and options.width is not None else DEFAULT_WIDTH
    height = options.effective_height if options is not None else DEFAULT_HEIGHT
    svg = generate_svg(label, count, css, width, height, options)
    metrics.inc("svg_render")
    return svg
