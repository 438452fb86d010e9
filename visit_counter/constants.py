"""
Constants and default values for the visit counter service.

This module centralizes the defaults used by the renderer and the HTTP layer
so the URL builder, the SVG endpoint and the CSS builder agree on what
"not specified" means.
"""

# Badge defaults
DEFAULT_LABEL = "Visits"
DEFAULT_WIDTH = 150
DEFAULT_HEIGHT = 20
DEFAULT_FONT_SIZE = 11
DEFAULT_ELEMENT_POSITIONS = "label,logo,counter"

# Label share of the total width when there is no logo section
LABEL_WIDTH_RATIO = 0.667

# Logo section
DEFAULT_LOGO_WIDTH = 30
LOGO_SCALE_TALL = 0.7  # height > DEFAULT_HEIGHT
LOGO_SCALE_SHORT = 0.8

# Border
DEFAULT_BORDER_RADIUS = 3
DEFAULT_BORDER_COLOR = "#cccccc"

# Vertical text centering factor applied to the font size
TEXT_BASELINE_FACTOR = 0.35

# Counters are unsigned 64-bit values
COUNT_MAX = 2 ** 64 - 1

# Response headers for rendered badges; badges must never be cached
SVG_MEDIA_TYPE = "image/svg+xml"
NO_CACHE_HEADERS = {
    "Cache-Control": "max-age=0, no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}

# Suffix inserted before the extension of the counters file for badge metadata
BADGES_FILE_SUFFIX = "_badges"
