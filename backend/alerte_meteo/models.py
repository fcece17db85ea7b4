# alerte_meteo/models.py
# ------------------------------------------------------------
# Domain models for the current weather alert service.
#
# Field names follow the JSON wire format read by the public
# page (camelCase timestamps, "region" kept for old readers).
# ------------------------------------------------------------

from pydantic import BaseModel, Field
from typing import Optional, Literal, List
from datetime import datetime, timezone


# -------------------------------
# Shared helpers & enums
# -------------------------------
AlertLevel = Literal["none", "yellow", "orange", "red"]
ALERT_LEVELS = ("none", "yellow", "orange", "red")

NO_ALERT_TITLE = "Aucune alerte"


def utcnow() -> datetime:
    """
    Always return timezone-aware UTC datetime.
    """
    return datetime.now(timezone.utc)


def iso_utc(dt: datetime) -> str:
    """
    UTC ISO string with millisecond precision and 'Z' suffix
    (same shape as the browser's Date.toISOString()).
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# -------------------------------
# Alert record
# -------------------------------
class AlertRecord(BaseModel):
    """
    The single current alert document.

    `active` is derived: it is recomputed from `level` and the
    optional [startAt, endAt] window on every read.
    """

    active: bool = False
    level: AlertLevel = "none"

    # canonical multi-wilaya field
    regions: List[str] = Field(default_factory=list)
    # legacy single-wilaya field, always regions[0] or ""
    region: str = ""

    title: str = NO_ALERT_TITLE
    message: str = ""

    # ISO-8601, "" means unbounded on that side
    startAt: str = ""
    endAt: str = ""

    updatedAt: str = ""


def default_alert() -> AlertRecord:
    """
    The "no alert" record returned before any write and after expiry.
    """
    return AlertRecord()


# -------------------------------
# Wilaya geodata
# -------------------------------
class WilayaGeoEntry(BaseModel):
    name: str
    latitude: float
    longitude: float


class WilayaDataset(BaseModel):
    regions: List[WilayaGeoEntry] = Field(default_factory=list)


# -------------------------------
# API envelopes
# -------------------------------
class LoginRequest(BaseModel):
    username: str = ""
    password: str = ""


class ApiResult(BaseModel):
    ok: bool
    error: Optional[str] = None
