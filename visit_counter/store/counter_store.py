"""File-backed, thread-safe storage for named counters and their badge records.

The store keeps one record per name (count plus timestamps) in memory and
writes two sibling JSON snapshots on every mutation:

  counters.json         name -> count
  counters_badges.json  name -> {name, count, created_at, last_accessed}

Durability is best effort. Write failures are logged and counted in the
``persist_failure`` metric but never raised; the in-memory state stays
authoritative until the next successful write.
"""
from __future__ import annotations

import dataclasses
import json
import logging
import os
import pathlib
import tempfile
import threading
from datetime import datetime
from typing import Any, Dict, List, Optional

from visit_counter import metrics
from visit_counter.constants import BADGES_FILE_SUFFIX
from visit_counter.exceptions import PersistenceError
from visit_counter.models.badge import Badge, utc_now

logger = logging.getLogger(__name__)


def badges_path_for(path: str) -> str:
    """Return the badge metadata file that sits next to a counters file.

    ``counters.json`` -> ``counters_badges.json``. A path without an
    extension gets ``_badges.json`` appended.
    """
    p = pathlib.Path(path)
    suffix = p.suffix or ".json"
    return str(p.with_name(f"{p.stem}{BADGES_FILE_SUFFIX}{suffix}"))


def _read_json(path: str) -> Optional[Any]:
    """Read a JSON document, returning None when the file does not exist."""
    if not os.path.exists(path):
        return None
    with open(path, "r", encoding="utf-8") as fh:
        return json.load(fh)


def write_json_atomic(path: str, data: Any) -> None:
    """Pretty-print ``data`` to ``path`` via a temporary sibling and rename.

    Raises:
        PersistenceError: If the data cannot be serialized or written
    """
    try:
        content = json.dumps(data, indent=2, sort_keys=True)
    except (TypeError, ValueError) as e:
        raise PersistenceError(f"Cannot serialize snapshot for {path}: {e}", path=path,
                               operation="serialize", original_error=e) from e
    directory = os.path.dirname(os.path.abspath(path))
    tmp_name = None
    try:
        pathlib.Path(directory).mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile("w", encoding="utf-8", dir=directory,
                                         prefix=".tmp-", suffix=".json", delete=False) as fh:
            tmp_name = fh.name
            fh.write(content)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as e:
        raise PersistenceError(f"Cannot write {path}: {e}", path=path,
                               operation="write", original_error=e) from e
    finally:
        if tmp_name is not None:
            try:
                os.remove(tmp_name)
            except OSError:
                pass


def load_counters(path: str) -> Dict[str, int]:
    """Load the name -> count map, or an empty map if it is missing or invalid."""
    try:
        data = _read_json(path)
    except (OSError, ValueError) as e:
        logger.warning(f"Failed to read counters from {path}: {e}")
        metrics.inc("load_failure")
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict) or not all(
        isinstance(k, str) and isinstance(v, int) and not isinstance(v, bool) and v >= 0
        for k, v in data.items()
    ):
        logger.warning(f"Ignoring malformed counters file {path}")
        metrics.inc("load_failure")
        return {}
    return dict(data)


def load_badges(path: str) -> Dict[str, Badge]:
    """Load the name -> Badge map, or an empty map if it is missing or invalid."""
    try:
        data = _read_json(path)
    except (OSError, ValueError) as e:
        logger.warning(f"Failed to read badges from {path}: {e}")
        metrics.inc("load_failure")
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Ignoring malformed badges file {path}")
        metrics.inc("load_failure")
        return {}
    try:
        return {str(name): Badge.from_dict(record) for name, record in data.items()}
    except ValueError as e:
        logger.warning(f"Ignoring malformed badges file {path}: {e}")
        metrics.inc("load_failure")
        return {}


class CounterStore:
    """Thread-safe store of named counters with badge metadata.

    Each name maps to a single Badge record holding the count and the
    timestamps, so a counter value and its badge can never disagree. All
    access goes through one lock; every mutation rewrites both snapshot
    files before returning.

    Usage:
      store = CounterStore("data/counters.json")
      store.increment("home")   # -> 1
      store.get("home")         # -> 1
      store.get_badge("home")   # -> Badge(name='home', count=1, ...)
    """

    def __init__(self, path: str) -> None:
        self.path = str(path)
        self.badges_path = badges_path_for(self.path)
        self._lock = threading.Lock()
        self._records: Dict[str, Badge] = self._load()
        logger.info(f"Loaded {len(self._records)} counters from {self.path}")

    def _load(self) -> Dict[str, Badge]:
        counters = load_counters(self.path)
        badges = load_badges(self.badges_path)
        # The counters file is authoritative: it decides which names exist and
        # their values. Badge records only contribute timestamps.
        records: Dict[str, Badge] = {}
        now = utc_now()
        missing = 0
        for name, count in counters.items():
            badge = badges.get(name)
            if badge is None:
                missing += 1
                records[name] = Badge(name=name, count=count, created_at=now, last_accessed=now)
            else:
                records[name] = dataclasses.replace(badge, name=name, count=count)
        if missing:
            logger.warning(f"{missing} counters in {self.path} had no badge record")
        orphans = sorted(name for name in badges if name not in counters)
        if orphans:
            logger.warning(f"Dropping {len(orphans)} badge records without a counter in {self.path}: {orphans}")
        return records

    # -- reads ---------------------------------------------------------------

    def get(self, name: str) -> int:
        """Return the current count for ``name`` (0 if it was never touched)."""
        with self._lock:
            record = self._records.get(name)
            count = record.count if record is not None else 0
        metrics.inc("counter_get")
        return count

    def get_badge(self, name: str) -> Optional[Badge]:
        with self._lock:
            record = self._records.get(name)
            return dataclasses.replace(record) if record is not None else None

    def get_all_badges(self) -> List[Badge]:
        """Return a snapshot of every badge. Order is not guaranteed."""
        with self._lock:
            return [dataclasses.replace(r) for r in self._records.values()]

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._records

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    # -- writes --------------------------------------------------------------

    def increment(self, name: str) -> int:
        """Add one to ``name``, persist, and return the new count."""
        with self._lock:
            current = self._records.get(name)
            new_count = (current.count if current is not None else 0) + 1
            self._touch(name, new_count)
            self._persist()
        metrics.inc("counter_increment")
        return new_count

    def set(self, name: str, value: int) -> None:
        """Overwrite the count for ``name``. The value may be lower than before."""
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValueError(f"count must be a non-negative integer, got {value!r}")
        with self._lock:
            self._touch(name, value)
            self._persist()
        metrics.inc("counter_set")

    def create_badge(self, name: str, initial_count: Optional[int] = None) -> Badge:
        """Create (or overwrite) the counter and badge for ``name``.

        Callers are expected to check for an existing badge first; this
        method does not.
        """
        count = initial_count if initial_count is not None else 0
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise ValueError(f"count must be a non-negative integer, got {initial_count!r}")
        now = utc_now()
        badge = Badge(name=name, count=count, created_at=now, last_accessed=now)
        with self._lock:
            self._records[name] = badge
            self._persist()
        metrics.inc("badge_create")
        logger.info(f"Created badge {name!r} with count {count}")
        return dataclasses.replace(badge)

    def delete_badge(self, name: str) -> bool:
        """Remove the counter and badge for ``name``. Returns False if absent."""
        with self._lock:
            if self._records.pop(name, None) is None:
                return False
            self._persist()
        metrics.inc("badge_delete")
        logger.info(f"Deleted badge {name!r}")
        return True

    # -- internals (lock held) ----------------------------------------------

    def _touch(self, name: str, count: int) -> None:
        now = utc_now()
        record = self._records.get(name)
        if record is None:
            self._records[name] = Badge(name=name, count=count, created_at=now, last_accessed=now)
            return
        record.count = count
        record.last_accessed = _not_before(now, record.last_accessed)

    def _persist(self) -> None:
        counters = {name: r.count for name, r in self._records.items()}
        badges = {name: r.to_dict() for name, r in self._records.items()}
        for path, data in ((self.path, counters), (self.badges_path, badges)):
            try:
                write_json_atomic(path, data)
            except PersistenceError as e:
                metrics.inc("persist_failure")
                logger.error(f"Failed to persist {e.path} ({e.operation}): {e.original_error}")


def _not_before(now: datetime, previous: datetime) -> datetime:
    # wall clock may step backwards; last_accessed must not
    return now if now >= previous else previous
