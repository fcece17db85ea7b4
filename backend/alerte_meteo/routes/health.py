# alerte_meteo/routes/health.py
# ------------------------------------------------------------
# Health endpoint
#
# Purpose:
# - quick liveness check (hosting platform probes)
# - store reachability
# - last write timestamp of the alert document
# ------------------------------------------------------------

from fastapi import APIRouter, Depends
from datetime import datetime, timezone
import time

from ..config import settings
from ..errors import StoreError
from ..store import AlertStore
from ._common import get_alert_store

router = APIRouter(tags=["health"])

# server start reference (module load time)
STARTED_AT = datetime.now(timezone.utc)


def _utc_now_iso():
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@router.get("/api/health")
def health(store: AlertStore = Depends(get_alert_store)):
    """
    Health status.

    Returns:
    - ok, utc
    - started_at, uptime_seconds
    - store (backend name, reachability)
    - alert_updated_at (raw stored value, null if never written)
    - latency_ms (server-measured for this handler)
    """
    t0 = time.perf_counter()

    store_ok = store.ping()
    updated_at = None
    if store_ok:
        try:
            raw = store.read()
        except StoreError:
            store_ok = False
            raw = None
        if raw and isinstance(raw.get("updatedAt"), str):
            updated_at = raw["updatedAt"] or None

    now = datetime.now(timezone.utc)
    uptime_seconds = int((now - STARTED_AT).total_seconds())

    latency_ms = round((time.perf_counter() - t0) * 1000, 2)

    return {
        # API is up even when the store is not; see store.ok
        "ok": True,
        "utc": _utc_now_iso(),
        "started_at": STARTED_AT.isoformat().replace("+00:00", "Z"),
        "uptime_seconds": uptime_seconds,
        "store": {"backend": settings.store_backend, "ok": store_ok},
        "alert_updated_at": updated_at,
        "latency_ms": latency_ms,
    }
