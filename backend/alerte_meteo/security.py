# alerte_meteo/security.py
# ------------------------------------------------------------
# Admin session guard.
#
# One shared admin identity (ADMIN_USER / ADMIN_PASS) trades its
# credentials for a signed JWT kept in an httpOnly cookie.
# Every mutating route depends on `require_admin`.
# ------------------------------------------------------------

from __future__ import annotations

import secrets
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from fastapi import Request, Response
from jose import JWTError, jwt

from .config import settings
from .errors import SessionExpired, SessionMissing
from .models import utcnow


def check_credentials(username: str, password: str) -> bool:
    """
    Compare against the configured identity.
    An unconfigured identity never matches.
    """
    if not settings.admin_user or not settings.admin_pass:
        return False
    user_ok = secrets.compare_digest(
        (username or "").encode("utf-8"), settings.admin_user.encode("utf-8")
    )
    pass_ok = secrets.compare_digest(
        (password or "").encode("utf-8"), settings.admin_pass.encode("utf-8")
    )
    return user_ok and pass_ok


def create_session_token(username: str, now: Optional[datetime] = None) -> str:
    """
    Signed session token valid for settings.session_ttl_days.
    """
    issued = now or utcnow()
    claims = {
        "u": username,
        "iat": int(issued.timestamp()),
        "exp": int((issued + timedelta(days=settings.session_ttl_days)).timestamp()),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_session_token(token: Optional[str]) -> Dict[str, Any]:
    """
    Return the token claims.

    Raises:
        SessionMissing: no token presented
        SessionExpired: bad signature, malformed or expired token
    """
    if not token:
        raise SessionMissing("no session cookie")
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise SessionExpired(str(exc)) from exc


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_ttl_days * 24 * 3600,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
    )


def require_admin(request: Request) -> Dict[str, Any]:
    """
    FastAPI dependency guarding admin routes.
    Pass-through on success; AdminAuthError subclasses otherwise.
    """
    return verify_session_token(request.cookies.get(settings.session_cookie_name))
