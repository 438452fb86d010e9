"""
Badge model: the metadata record kept alongside each named counter.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict

# Fractional seconds longer than microseconds (e.g. nanosecond timestamps)
_FRACTION_RE = re.compile(r"\.(\d{6})\d+")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Return an ISO-8601 UTC timestamp with a trailing 'Z'."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp as written by format_timestamp.

    Accepts a trailing 'Z' and truncates sub-microsecond precision. Naive
    values are assumed to be UTC.

    Raises:
        ValueError: If the value is not a recognizable timestamp
    """
    if not isinstance(value, str):
        raise ValueError(f"timestamp must be a string, got {type(value).__name__}")
    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    text = _FRACTION_RE.sub(r".\1", text)
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


@dataclass
class Badge:
    """Metadata record for a named counter.

    Attributes:
        name: Counter name (same key as the counter)
        count: Current counter value
        created_at: When the badge was first created (never changes)
        last_accessed: When the counter was last incremented or set
    """
    name: str
    count: int
    created_at: datetime
    last_accessed: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "count": self.count,
            "created_at": format_timestamp(self.created_at),
            "last_accessed": format_timestamp(self.last_accessed),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Badge":
        """Build a Badge from its serialized form.

        Raises:
            ValueError: If a field is missing or has the wrong type
        """
        if not isinstance(data, dict):
            raise ValueError(f"badge record must be an object, got {type(data).__name__}")
        try:
            name = data["name"]
            count = data["count"]
            created_at = data["created_at"]
            last_accessed = data["last_accessed"]
        except KeyError as e:
            raise ValueError(f"badge record missing field {e}") from e
        if not isinstance(name, str):
            raise ValueError("badge name must be a string")
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise ValueError(f"badge count must be a non-negative integer, got {count!r}")
        return cls(
            name=name,
            count=count,
            created_at=parse_timestamp(created_at),
            last_accessed=parse_timestamp(last_accessed),
        )
