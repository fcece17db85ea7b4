# alerte_meteo/client/display.py
# ------------------------------------------------------------
# What the public page shows for a given alert record.
#
# Pure functions: record (+ optional geodata, warning) -> AlertView.
# The sync agent hands the view to whatever renderer it was
# given (console for `alerte-meteo watch`, a UI in other hosts).
# ------------------------------------------------------------

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ..activation import parse_iso
from ..geo import RegionIndex
from ..models import NO_ALERT_TITLE, AlertRecord, WilayaGeoEntry
from ..normalizer import DEFAULT_ACTIVE_TITLE

BADGES = {
    "yellow": "🟡 Vigilance Jaune",
    "orange": "🟠 Vigilance Orange",
    "red": "🔴 Vigilance Rouge",
}
NO_ALERT_BADGE = "✅ Aucune alerte"
UNKNOWN_BADGE = "⚠️ Alerte"
ERROR_BADGE = "⚠️ Service indisponible"

RECONNECTING_WARNING = "Connexion au serveur perdue, nouvelle tentative…"
ERROR_TITLE = "Impossible de charger l'alerte"


@dataclass
class AlertView:
    badge: str
    level: str
    active: bool
    title: str
    message: str = ""
    regions: List[str] = field(default_factory=list)
    # geodata for the highlighted wilayas; empty until the dataset loads
    markers: List[WilayaGeoEntry] = field(default_factory=list)
    updated_at: str = "—"
    warning: Optional[str] = None
    error: bool = False


def format_badge_text(level: str, active: bool) -> str:
    if not active or level == "none":
        return NO_ALERT_BADGE
    return BADGES.get(level, UNKNOWN_BADGE)


def format_updated_at(value: str) -> str:
    """dd/mm/YYYY HH:MM:SS in local time, "—" when unknown."""
    dt = parse_iso(value)
    if dt is None:
        return "—"
    return dt.astimezone().strftime("%d/%m/%Y %H:%M:%S")


def build_view(
    record: AlertRecord,
    regions_index: Optional[RegionIndex] = None,
    warning: Optional[str] = None,
) -> AlertView:
    active = record.active and record.level != "none"

    if not active:
        return AlertView(
            badge=format_badge_text(record.level, False),
            level="none",
            active=False,
            title=NO_ALERT_TITLE,
            updated_at=format_updated_at(record.updatedAt),
            warning=warning,
        )

    markers = regions_index.resolve_many(record.regions) if regions_index else []
    return AlertView(
        badge=format_badge_text(record.level, True),
        level=record.level,
        active=True,
        title=record.title or DEFAULT_ACTIVE_TITLE,
        message=record.message,
        regions=list(record.regions),
        markers=markers,
        updated_at=format_updated_at(record.updatedAt),
        warning=warning,
    )


def build_error_view() -> AlertView:
    """Shown only when no alert has ever been fetched."""
    return AlertView(
        badge=ERROR_BADGE,
        level="none",
        active=False,
        title=ERROR_TITLE,
        warning=RECONNECTING_WARNING,
        error=True,
    )


def render_text(view: AlertView) -> str:
    lines = [view.badge, view.title]
    if view.message:
        lines.append(view.message)
    if view.regions:
        lines.append("📍 Wilayas : " + " • ".join(view.regions))
    for m in view.markers:
        lines.append(f"   {m.name} ({m.latitude:.3f}, {m.longitude:.3f})")
    lines.append(f"Mise à jour : {view.updated_at}")
    if view.warning:
        lines.append(f"[{view.warning}]")
    return "\n".join(lines)
