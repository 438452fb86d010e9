"""SVG document generation for counter badges.

Geometry that depends on options (section widths, offsets, colors) lives in
CSS custom properties; the document itself only fixes the overall size and
the optional logo and border elements.
"""
from __future__ import annotations

from typing import Optional

from visit_counter.models.render_options import RenderOptions

from ._numbers import fmt_num, logo_size

SVG_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<svg width="{width}" height="{height}" xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink" class="svg-counter">
<style type="text/css"><![CDATA[
{css}
]]></style>
<defs>
  <linearGradient id="grad" x2="0" y2="100%">
    <stop offset="0" stop-color="var(--grad-stop1-color)" stop-opacity="var(--grad-stop1-opacity)"/>
    <stop offset="1" stop-opacity="var(--grad-stop2-opacity)"/>
  </linearGradient>
  <mask id="mask">
    <rect class="mask-rect" fill="#fff"/>
  </mask>
</defs>
<g mask="url(#mask)">
  <rect class="left-rect"/>
  <rect class="right-rect"/>
  <rect class="overlay-rect" fill="url(#grad)"/>
  {logo_element}
</g>
{border_element}
<g class="text-group">
  <text class="label-shadow">{label}</text>
  <text class="label">{label}</text>
  <text class="count-shadow">{count}</text>
  <text class="count">{count}</text>
</g>
</svg>"""


def logo_element(options: Optional[RenderOptions], height: int) -> str:
    if options is None or not options.has_logo:
        return ""
    url = options.logo_url
    size = logo_size(height)
    # positioned by .logo-image in the custom CSS
    return (
        f'<rect class="logo-rect"/>'
        f'<image href="{url}" xlink:href="{url}" class="logo-image" width="{size}" height="{size}" '
        f'preserveAspectRatio="xMidYMid meet"/>'
    )


def border_element(options: Optional[RenderOptions], width: int, height: int) -> str:
    if options is None or not options.has_border:
        return ""
    border_width = float(options.border_width)
    half = border_width / 2
    return (
        f'<rect class="border-rect" width="{fmt_num(width - border_width)}" '
        f'height="{fmt_num(height - border_width)}" x="{fmt_num(half)}" y="{fmt_num(half)}"/>'
    )


def generate_svg(label: str, count: int, css: str, width: int, height: int,
                 options: Optional[RenderOptions] = None) -> str:
    """Generate an SVG counter image.

    Args:
        label: Text shown in the label section
        count: Counter value shown in the counter section
        css: Stylesheet embedded verbatim in the document
        width: Document width in px
        height: Document height in px
        options: Render options; only logo_url/logo_width and border_width
            affect the markup, everything else is carried by ``css``

    Returns:
        The SVG document as text
    """
    return SVG_TEMPLATE.format(
        width=width,
        height=height,
        css=css,
        label=label,
        count=count,
        logo_element=logo_element(options, height),
        border_element=border_element(options, width, height),
    )
