"""Read-only view of the process-local event counters.

The store and renderer count these events; each is always present in the
response, at 0 until it first happens:

  counter_get, counter_increment, counter_set   counter reads and writes
  badge_create, badge_delete                    admin badge lifecycle
  svg_render                                    badges rendered
  persist_failure, load_failure                 snapshot file I/O errors

Counters incremented under other names are passed through as well.
"""
from fastapi import APIRouter

from visit_counter import metrics

STORE_EVENTS = (
    "counter_get",
    "counter_increment",
    "counter_set",
    "badge_create",
    "badge_delete",
    "svg_render",
    "persist_failure",
    "load_failure",
)

router = APIRouter()


@router.get("/api/metrics")
def get_metrics():
    """Return every counter, store events first."""
    counts = metrics.get_all()
    snapshot = {name: counts.pop(name, 0) for name in STORE_EVENTS}
    snapshot.update(sorted(counts.items()))
    return snapshot
