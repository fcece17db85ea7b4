# alerte_meteo/routes/alert.py
# ------------------------------------------------------------
# Current alert API
#
# - GET  /api/alert    public, always 200 with a full record
# - POST /api/alert    admin, full replace of the record
# - POST /api/disable  admin, reset to the default record
# ------------------------------------------------------------

from fastapi import APIRouter, Depends, Request, Response
from fastapi.concurrency import run_in_threadpool

from ..models import AlertRecord
from ..security import require_admin
from ..service import AlertService
from ._common import envelope, get_alert_service, json_body

router = APIRouter(tags=["alert"])


@router.get("/api/alert", response_model=AlertRecord)
def read_alert(response: Response, service: AlertService = Depends(get_alert_service)):
    """
    The alert as it should be displayed right now.
    Expired or disabled alerts come back as the default record.
    """
    # the public page polls this; never serve a cached state
    response.headers["Cache-Control"] = "no-store"
    return service.read_current()


@router.post("/api/alert", dependencies=[Depends(require_admin)])
async def publish_alert(request: Request, service: AlertService = Depends(get_alert_service)):
    payload = await json_body(request)
    await run_in_threadpool(service.publish, payload)
    return envelope(True)


@router.post("/api/disable", dependencies=[Depends(require_admin)])
def disable_alert(service: AlertService = Depends(get_alert_service)):
    service.disable()
    return envelope(True)
