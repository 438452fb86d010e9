"""Build the per-badge CSS block from RenderOptions.

The output is a ``:root { ... }`` block of custom properties consumed by the
base stylesheet, followed by supplementary rules. Rules are applied in a
fixed order (see ROOT_RULES and EXTRA_RULES): later entries may rely on, or
deliberately override, what earlier ones emitted. Specific colors always
beat the deprecated text_color/background_color fallbacks.

Values are embedded as given (only colors get a '#' prefix). In particular
``style`` is appended verbatim, so whoever exposes this to untrusted input
owns sanitizing it.
"""
from __future__ import annotations

from typing import Callable, List, Optional, Sequence

from visit_counter.constants import (
    DEFAULT_BORDER_COLOR, DEFAULT_BORDER_RADIUS, DEFAULT_ELEMENT_POSITIONS,
    DEFAULT_FONT_SIZE, DEFAULT_HEIGHT, LABEL_WIDTH_RATIO, TEXT_BASELINE_FACTOR,
)
from visit_counter.models.render_options import RenderOptions

from ._numbers import fmt_num, logo_margin, round_half_up


def normalize_color(color: str) -> str:
    """Prefix a color with '#' unless it already has one."""
    return color if color.startswith("#") else f"#{color}"


def parse_element_positions(value: Optional[str]) -> List[str]:
    positions = value if value is not None else DEFAULT_ELEMENT_POSITIONS
    return [token.strip() for token in positions.split(",")]


class CssBuilder:
    """Accumulates custom properties and trailing rules for one badge."""

    def __init__(self) -> None:
        self.root: List[str] = []
        self.rules: List[str] = []

    def prop(self, name: str, value) -> None:
        self.root.append(f"  {name}: {value};\n")

    def px(self, name: str, value: Optional[int]) -> None:
        if value is not None:
            self.prop(name, f"{value}px")

    def color(self, name: str, value: Optional[str]) -> None:
        if value is not None:
            self.prop(name, normalize_color(value))

    def number(self, name: str, value) -> None:
        if value is not None:
            self.prop(name, fmt_num(value))

    def rule(self, text: str) -> None:
        self.rules.append(text)

    def render(self) -> str:
        return ":root {\n" + "".join(self.root) + "}\n" + "".join(self.rules)


Rule = Callable[[RenderOptions, CssBuilder], None]


# -- :root custom properties ----------------------------------------------------

def _dimensions(opts: RenderOptions, css: CssBuilder) -> None:
    if opts.width is None:
        css.px("--label-width", opts.label_width)
        css.px("--counter-width", opts.counter_width)
        return
    css.px("--width", opts.width)
    if opts.label_width is not None or opts.counter_width is not None:
        css.px("--label-width", opts.label_width)
        css.px("--counter-width", opts.counter_width)
        return
    _auto_layout(opts, css)


def _auto_layout(opts: RenderOptions, css: CssBuilder) -> None:
    """Distribute the total width over the sections in element order."""
    width = opts.width
    elements = parse_element_positions(opts.element_positions)
    has_logo = "logo" in elements and opts.has_logo
    logo_width = opts.effective_logo_width if has_logo else 0

    section_width = max(0, width - logo_width) // 2
    label_share = round_half_up(width * LABEL_WIDTH_RATIO)

    x = 0
    for element in elements:
        if element == "label":
            w = section_width if has_logo else label_share
            css.px("--label-width", w)
            css.px("--label-x", x)
            css.px("--label-offset-x", x + w // 2)
            x += w
        elif element == "logo":
            if has_logo:
                css.px("--logo-width", logo_width)
                css.px("--logo-x", x)
                css.px("--logo-offset-x", x + logo_width // 2)
                x += logo_width
        elif element == "counter":
            w = section_width if has_logo else max(0, width - label_share)
            css.px("--counter-width", w)
            css.px("--counter-x", x)
            css.px("--counter-offset-x", x + w // 2)
            x += w


def _height(opts: RenderOptions, css: CssBuilder) -> None:
    css.px("--height", opts.height)
    css.px("--radius", opts.radius)


def _gradient(opts: RenderOptions, css: CssBuilder) -> None:
    css.color("--grad-stop1-color", opts.grad_stop1_color)
    css.number("--grad-stop1-opacity", opts.grad_stop1_opacity)
    css.number("--grad-stop2-opacity", opts.grad_stop2_opacity)


def _text(opts: RenderOptions, css: CssBuilder) -> None:
    if opts.font_family is not None:
        css.prop("--font-family", opts.font_family)
    css.px("--font-size", opts.font_size)
    css.px("--label-offset-x", opts.label_offset_x)
    css.px("--label-offset-y", opts.label_offset_y)
    css.px("--counter-offset-x", opts.counter_offset_x)
    css.px("--counter-offset-y", opts.counter_offset_y)


def _shadow(opts: RenderOptions, css: CssBuilder) -> None:
    css.color("--shadow-fill", opts.shadow_fill)
    css.number("--shadow-opacity", opts.shadow_opacity)


def _colors(opts: RenderOptions, css: CssBuilder) -> None:
    css.color("--background-label", opts.background_label)
    css.color("--background-counter", opts.background_counter)
    css.color("--label-color", opts.label_color)
    css.color("--counter-color", opts.counter_color)


def _deprecated_colors(opts: RenderOptions, css: CssBuilder) -> None:
    if opts.text_color is not None:
        if opts.label_color is None:
            css.color("--label-color", opts.text_color)
        if opts.counter_color is None:
            css.color("--counter-color", opts.text_color)
    if opts.background_color is not None:
        if opts.background_label is None:
            css.color("--background-label", opts.background_color)
        if opts.background_counter is None:
            css.color("--background-counter", opts.background_color)


ROOT_RULES: Sequence[Rule] = (
    _dimensions,
    _height,
    _gradient,
    _text,
    _shadow,
    _colors,
    _deprecated_colors,
)


# -- rules after the :root block ------------------------------------------------

def _radius(opts: RenderOptions, css: CssBuilder) -> None:
    # inner badge shape only; the border rect has its own radius below
    if opts.radius is not None:
        css.rule(f".mask-rect {{ rx: {opts.radius}px; ry: {opts.radius}px; }}\n")


def _logo(opts: RenderOptions, css: CssBuilder) -> None:
    if not opts.has_logo:
        return
    half_logo = opts.effective_logo_width // 2
    margin = logo_margin(opts.effective_height)
    css.rule(
        "\n"
        ".logo-rect {\n"
        "  width: var(--logo-width, 30px);\n"
        "  height: var(--height);\n"
        "  fill: var(--background-logo, transparent);\n"
        "  transform: translateX(calc(var(--logo-offset-x, 50px) - var(--logo-width, 30px) / 2));\n"
        "}\n"
        ".logo-image {\n"
        f"  transform: translate(calc(var(--logo-offset-x, 50px) - {half_logo}px), {margin}px);\n"
        "}\n"
    )


def inner_radius(border_radius: int, border_width: int) -> int:
    """Mask radius that keeps the badge body inside a rounded border."""
    half = border_width * 0.5
    if border_radius > half:
        return round_half_up(border_radius - half)
    return 0


def _border_radius(opts: RenderOptions, css: CssBuilder) -> None:
    if opts.border_radius is not None:
        outer = opts.border_radius
    elif opts.has_border:
        outer = DEFAULT_BORDER_RADIUS
    else:
        return
    border_width = opts.border_width if opts.border_width is not None else 1
    inner = inner_radius(outer, border_width)
    css.rule(f".border-rect {{ rx: {outer}px; ry: {outer}px; }}\n")
    css.rule(f".mask-rect {{ rx: {inner}px; ry: {inner}px; }}\n")


def _font_weight(opts: RenderOptions, css: CssBuilder) -> None:
    if opts.font_weight is not None:
        css.rule(f":root {{ --font-weight: {opts.font_weight}; }}\n")
        css.rule(f".text-group {{ font-weight: {opts.font_weight} !important; }}\n")


def _border_stroke(opts: RenderOptions, css: CssBuilder) -> None:
    if not opts.has_border:
        return
    color = normalize_color(opts.border_color) if opts.border_color is not None else DEFAULT_BORDER_COLOR
    css.rule(f".border-rect {{ fill: none; stroke: {color}; stroke-width: {opts.border_width}; }}\n")


def _vertical_centering(opts: RenderOptions, css: CssBuilder) -> None:
    # approximate baseline for non-default heights
    if opts.height is None or opts.height == DEFAULT_HEIGHT:
        return
    font_size = opts.font_size if opts.font_size is not None else DEFAULT_FONT_SIZE
    y = round_half_up(opts.height / 2 + font_size * TEXT_BASELINE_FACTOR)
    css.rule(f":root {{ --label-offset-y: {y}px; --counter-offset-y: {y}px; }}\n")


def _style(opts: RenderOptions, css: CssBuilder) -> None:
    if opts.style is not None:
        css.rule(opts.style)


EXTRA_RULES: Sequence[Rule] = (
    _radius,
    _logo,
    _border_radius,
    _font_weight,
    _border_stroke,
    _vertical_centering,
    _style,
)


def build_custom_css(options: Optional[RenderOptions]) -> str:
    """Return the CSS for ``options``, or an empty string when there are none."""
    if options is None:
        return ""
    css = CssBuilder()
    for rule in ROOT_RULES:
        rule(options, css)
    for rule in EXTRA_RULES:
        rule(options, css)
    return css.render()
