# alerte_meteo/activation.py
# ------------------------------------------------------------
# Read-time activation evaluation.
#
# Whether the stored alert is "in effect" depends on the clock,
# so it is derived on every read instead of being stored:
#   - no window      -> active iff level != "none"
#   - [startAt,endAt] -> active iff now is inside and level != "none"
# An inactive record is returned as the default record (only
# updatedAt survives) so stale text never reaches readers.
# ------------------------------------------------------------

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from .models import AlertRecord, default_alert, iso_utc


def parse_iso(v: str) -> Optional[datetime]:
    """
    Parse an ISO-8601 string into an aware UTC datetime.
    Naive values are read as UTC. Returns None for empty/invalid input.
    """
    if not v:
        return None
    s = v.strip()
    if s.endswith("Z") or s.endswith("z"):
        s = s[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def is_now_between(start_at: str, end_at: str, now: datetime) -> bool:
    """
    True when `now` lies inside [start_at, end_at].
    A missing or unparseable bound does not restrict that side.
    """
    start = parse_iso(start_at)
    end = parse_iso(end_at)

    if start is not None and now < start:
        return False
    if end is not None and now > end:
        return False
    return True


def evaluate_activation(record: AlertRecord, now: datetime) -> AlertRecord:
    """
    Return a copy of `record` with `active` set authoritatively.

    Inactive records (level "none", or outside their window) come back
    as the default record carrying the original updatedAt, or `now`
    when the record never had one.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    if record.startAt or record.endAt:
        in_window = is_now_between(record.startAt, record.endAt, now)
        active = in_window and record.level != "none"
    else:
        active = record.level != "none"

    if not active:
        cleared = default_alert()
        cleared.updatedAt = record.updatedAt or iso_utc(now)
        return cleared

    return record.model_copy(deep=True, update={"active": True})
