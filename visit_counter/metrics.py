"""Lightweight in-memory metrics counters used by the store and API endpoints.

This is intentionally simple and process-local. It exposes inc/get functions
so components can count events without pulling in heavy deps.
"""
from __future__ import annotations

import threading
from collections import Counter
from typing import Dict

_c = Counter()
_lock = threading.Lock()


def inc(name: str, n: int = 1) -> None:
    with _lock:
        _c[name] += n


def get(name: str) -> int:
    with _lock:
        return _c.get(name, 0)


def get_all() -> Dict[str, int]:
    with _lock:
        return dict(_c)


def reset_all() -> None:
    with _lock:
        _c.clear()
