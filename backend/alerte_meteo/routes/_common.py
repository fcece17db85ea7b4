# alerte_meteo/routes/_common.py
# ------------------------------------------------------------
# Shared dependencies for the API routers.
# Tests swap these out through app.dependency_overrides.
# ------------------------------------------------------------

from typing import Any, Dict, Optional

from fastapi import Depends, Request

from ..models import ApiResult
from ..service import AlertService
from ..store import AlertStore, get_store


def get_alert_store() -> AlertStore:
    return get_store()


def get_alert_service(store: AlertStore = Depends(get_alert_store)) -> AlertService:
    return AlertService(store)


def envelope(ok: bool, error: Optional[str] = None) -> Dict[str, Any]:
    """
    {"ok": true} or {"ok": false, "error": "..."}
    """
    if ok:
        return ApiResult(ok=True).model_dump(exclude_none=True)
    return ApiResult(ok=False, error=error or "Erreur").model_dump()


async def json_body(request: Request) -> Dict[str, Any]:
    # malformed bodies are coerced to {} like any other malformed field
    try:
        body = await request.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}
