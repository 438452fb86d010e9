"""Build badge URLs the way the configuration UI shares them."""
from __future__ import annotations

from typing import List, Optional, Tuple
from urllib.parse import quote, urlencode

from visit_counter.constants import DEFAULT_HEIGHT, DEFAULT_LABEL, DEFAULT_WIDTH
from visit_counter.models.render_options import RenderOptions


def badge_query(options: Optional[RenderOptions]) -> List[Tuple[str, str]]:
    """Query parameters for ``options``, leaving out values equal to the defaults."""
    if options is None:
        return []
    params: List[Tuple[str, str]] = []
    if options.label and options.label != DEFAULT_LABEL:
        params.append(("label", options.label))
    if options.width is not None and options.width != DEFAULT_WIDTH:
        params.append(("width", str(options.width)))
    if options.height is not None and options.height != DEFAULT_HEIGHT:
        params.append(("height", str(options.height)))
    for name, value in options.to_dict().items():
        if name in ("label", "width", "height", "style"):
            continue
        if value == "":
            continue
        params.append((name, str(value)))
    if options.style:
        params.append(("style", options.style))
    return params


def build_badge_url(name: str, options: Optional[RenderOptions] = None, base_url: str = "") -> str:
    """Return the SVG badge URL for counter ``name``.

    ``base_url`` (e.g. ``https://counter.example.com``) is prepended as-is
    when given; otherwise the URL is relative.
    """
    url = f"{base_url.rstrip('/')}/counter/{quote(name, safe='')}/svg"
    params = badge_query(options)
    if params:
        url += "?" + urlencode(params, quote_via=quote)
    return url
