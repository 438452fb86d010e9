from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response
import logging

from visit_counter.api.deps import get_store, parse_count, require_api_key
from visit_counter.constants import NO_CACHE_HEADERS, SVG_MEDIA_TYPE
from visit_counter.models import RenderOptions
from visit_counter.render import render_badge
from visit_counter.store import CounterStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/counter", tags=["counter"])
svg_router = APIRouter(tags=["badge"])


@router.get("/{name}")
def get_counter(name: str, store: CounterStore = Depends(get_store)):
    """Return the current count without incrementing it."""
    return {"name": name, "count": store.get(name)}


@router.post("/{name}/increment")
def increment_counter(name: str, store: CounterStore = Depends(get_store)):
    """Increment a counter and return the new count."""
    return {"name": name, "count": store.increment(name)}


@router.put("/{name}", dependencies=[Depends(require_api_key)])
def set_counter(name: str, payload: dict, store: CounterStore = Depends(get_store)):
    """Set a counter to an explicit value (administration).

    Payload: { "count": int }
    """
    count = parse_count(payload)
    store.set(name, count)
    logger.info(f"Counter {name!r} set to {count}")
    return {"name": name, "count": count}


def options_from_query(request: Request):
    """Parse RenderOptions from the query string, or None if no option is given."""
    params = request.query_params
    if not any(key in params for key in RenderOptions.field_names()):
        return None
    try:
        return RenderOptions.from_mapping(params)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@svg_router.get("/counter/{name}/svg")
def svg_counter(name: str, request: Request, store: CounterStore = Depends(get_store)):
    """Increment the counter and return it as an SVG badge.

    Query parameters are the RenderOptions fields (label, width, height,
    colors, border, logo, ...). The response must never be cached, otherwise
    repeat visits would not be counted.
    """
    options = options_from_query(request)
    count = store.increment(name)
    svg = render_badge(count, options)
    return Response(content=svg, media_type=SVG_MEDIA_TYPE, headers=dict(NO_CACHE_HEADERS))
