"""
Data models for the visit counter service.

Models:
- Badge: Metadata record mirroring a named counter
- RenderOptions: Optional visual customization parameters for a badge
"""

from visit_counter.models.badge import Badge, format_timestamp, parse_timestamp, utc_now
from visit_counter.models.render_options import RenderOptions

__all__ = ['Badge', 'RenderOptions', 'format_timestamp', 'parse_timestamp', 'utc_now']
