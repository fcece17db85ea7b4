# alerte_meteo/normalizer.py
# ------------------------------------------------------------
# Input normalization boundary.
#
# Several payload shapes were written over time:
#   - {"region": "Alger"}                 (first revision)
#   - {"regions": ["Alger", "Oran"]}      (current)
#   - {"zones": [...]} / {"wilayas": [...]} (front-end variants)
# Everything is mapped here to one AlertRecord so that the rest
# of the code only ever sees the canonical shape.
# ------------------------------------------------------------

from __future__ import annotations

from typing import Any, List, Mapping

from .errors import InvalidAlertPayload
from .models import ALERT_LEVELS, NO_ALERT_TITLE, AlertRecord

# title used when an alert is published without one
DEFAULT_ACTIVE_TITLE = "ALERTE MÉTÉO"

# precedence order for list-shaped region fields
REGION_LIST_FIELDS = ("regions", "zones", "wilayas")


def _str(v: Any, default: str = "") -> str:
    if isinstance(v, str):
        return v
    return default


def _clean_region_list(v: Any) -> List[str]:
    """
    Keep non-blank string items, stripped, first occurrence wins.
    Anything that is not a list/tuple yields [].
    """
    if not isinstance(v, (list, tuple)):
        return []

    out: List[str] = []
    for item in v:
        if not isinstance(item, str):
            continue
        name = item.strip()
        if name and name not in out:
            out.append(name)
    return out


def _pick_regions(data: Mapping[str, Any]) -> List[str]:
    # regions > zones/wilayas > region
    for field in REGION_LIST_FIELDS:
        regions = _clean_region_list(data.get(field))
        if regions:
            return regions

    single = _str(data.get("region")).strip()
    return [single] if single else []


def _pick_level(raw: Any, strict: bool) -> str:
    if raw is None:
        return "none"

    level = raw.strip().lower() if isinstance(raw, str) else None
    if level == "":
        return "none"
    if level in ALERT_LEVELS:
        return level

    if strict:
        raise InvalidAlertPayload(f"unknown alert level: {raw!r}")
    return "none"


def normalize_alert(data: Any, strict: bool = False) -> AlertRecord:
    """
    Map any supported payload shape to a canonical AlertRecord.

    - Missing or malformed fields fall back to their defaults.
    - `active` from the input is ignored; it is set provisionally from
      `level` and made authoritative by the activation evaluator.
    - With strict=True an unknown `level` raises InvalidAlertPayload
      (admin writes); otherwise it is coerced to "none" (reads).
    """
    if isinstance(data, AlertRecord):
        data = data.model_dump()
    if not isinstance(data, Mapping):
        data = {}

    level = _pick_level(data.get("level"), strict)
    regions = _pick_regions(data)

    title = _str(data.get("title"))
    if not title.strip():
        title = NO_ALERT_TITLE if level == "none" else DEFAULT_ACTIVE_TITLE

    return AlertRecord(
        active=level != "none",
        level=level,
        regions=regions,
        region=regions[0] if regions else "",
        title=title,
        message=_str(data.get("message")),
        startAt=_str(data.get("startAt")).strip(),
        endAt=_str(data.get("endAt")).strip(),
        updatedAt=_str(data.get("updatedAt")).strip(),
    )
