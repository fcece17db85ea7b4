# alerte_meteo/routes/session.py
# ------------------------------------------------------------
# Admin login / logout
#
# One shared identity. A successful login sets the signed
# session cookie that the admin routes check.
# ------------------------------------------------------------

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
import hashlib

import structlog

from ..models import LoginRequest
from ..security import (
    check_credentials,
    clear_session_cookie,
    create_session_token,
    set_session_cookie,
)
from ._common import envelope, json_body

router = APIRouter(tags=["session"])

logger = structlog.get_logger(__name__)


def _actor_id(req: Request) -> str:
    # best-effort identity for logs: IP + UA -> short hash
    ip = req.headers.get("x-forwarded-for") or (req.client.host if req.client else "unknown")
    ua = req.headers.get("user-agent", "")
    raw = f"{ip}|{ua}".encode("utf-8", errors="ignore")
    return hashlib.sha1(raw).hexdigest()[:6]


def _credentials(data: dict) -> LoginRequest:
    # anything that is not a string never matches
    def _s(v):
        return v if isinstance(v, str) else ""

    return LoginRequest(username=_s(data.get("username")), password=_s(data.get("password")))


@router.post("/api/login")
async def login(request: Request):
    actor = _actor_id(request)
    body = _credentials(await json_body(request))

    if not check_credentials(body.username, body.password):
        logger.warning("admin login rejected", actor=actor)
        return JSONResponse(status_code=401, content=envelope(False, "Identifiants incorrects"))

    response = JSONResponse(content=envelope(True))
    set_session_cookie(response, create_session_token(body.username))
    logger.info("admin login", actor=actor)
    return response


@router.post("/api/logout")
def logout():
    response = JSONResponse(content=envelope(True))
    clear_session_cookie(response)
    return response
