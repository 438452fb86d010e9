"""Visit counter badge service.

Durable named counters plus a renderer that turns a counter value and a bag
of visual options into an SVG badge.
"""

__version__ = "0.3.0"
