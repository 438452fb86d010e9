from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
import logging

from visit_counter.api.deps import get_store, parse_count, require_api_key
from visit_counter.store import CounterStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_api_key)])


@router.get("/badges")
def list_badges(store: CounterStore = Depends(get_store)):
    badges = [b.to_dict() for b in store.get_all_badges()]
    return {"total": len(badges), "badges": badges}


@router.get("/badges/{name}")
def get_badge(name: str, store: CounterStore = Depends(get_store)):
    badge = store.get_badge(name)
    if badge is None:
        raise HTTPException(status_code=404, detail=f"Badge not found: {name}")
    return badge.to_dict()


@router.post("/badges")
def create_badge(payload: dict, store: CounterStore = Depends(get_store)):
    """Create a badge.

    Payload: { "name": str, "count": optional int }
    """
    name = payload.get("name") if isinstance(payload, dict) else None
    if not isinstance(name, str) or not name:
        raise HTTPException(status_code=400, detail="name is required")
    count = parse_count(payload, required=False)
    if store.get_badge(name) is not None:
        raise HTTPException(status_code=409, detail=f"Badge already exists: {name}")
    return store.create_badge(name, count).to_dict()


@router.put("/badges/{name}")
def update_badge(name: str, payload: dict, store: CounterStore = Depends(get_store)):
    """Set the count of an existing badge.

    Payload: { "count": int }
    """
    count = parse_count(payload)
    if store.get_badge(name) is None:
        raise HTTPException(status_code=404, detail=f"Badge not found: {name}")
    store.set(name, count)
    badge = store.get_badge(name)
    if badge is None:
        # deleted concurrently
        raise HTTPException(status_code=404, detail=f"Badge not found: {name}")
    return badge.to_dict()


@router.delete("/badges/{name}", status_code=204)
def delete_badge(name: str, store: CounterStore = Depends(get_store)):
    if not store.delete_badge(name):
        raise HTTPException(status_code=404, detail=f"Badge not found: {name}")
    return Response(status_code=204)
