"""Request dependencies shared by the routers."""
from __future__ import annotations

import hmac
import logging
from typing import Optional

from fastapi import Header, HTTPException, Request

from visit_counter.config import Settings
from visit_counter.constants import COUNT_MAX
from visit_counter.store import CounterStore

logger = logging.getLogger(__name__)


def get_store(request: Request) -> CounterStore:
    store: Optional[CounterStore] = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(status_code=503, detail="Counter store not available")
    return store


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def require_api_key(
    request: Request,
    x_api_key: Optional[str] = Header(None),
    authorization: Optional[str] = Header(None),
) -> None:
    """Accept the configured key from ``x-api-key`` or ``Authorization: Bearer``."""
    expected = get_settings(request).api_key
    if not expected:
        logger.warning("Rejected privileged request: no API key configured")
        raise HTTPException(status_code=401, detail="API key not configured")
    supplied = x_api_key
    if supplied is None and authorization:
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() == "bearer":
            supplied = token.strip()
    if not supplied or not hmac.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8")):
        raise HTTPException(status_code=401, detail="Invalid or missing API key")


def parse_count(payload: dict, required: bool = True) -> Optional[int]:
    """Validate the ``count`` field of a JSON payload as an unsigned 64-bit integer."""
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="JSON object expected")
    count = payload.get("count")
    if count is None:
        if required:
            raise HTTPException(status_code=400, detail="count is required")
        return None
    if isinstance(count, bool) or not isinstance(count, int):
        raise HTTPException(status_code=400, detail=f"Invalid count: {count!r}")
    if not (0 <= count <= COUNT_MAX):
        raise HTTPException(status_code=400, detail=f"Invalid count: {count}. Must be between 0 and {COUNT_MAX}")
    return count
