# alerte_meteo/service.py
# ------------------------------------------------------------
# Alert service: composes normalizer + evaluator + store.
#
#   read:    store -> normalize (lenient) -> evaluate(now)
#   publish: normalize (strict) -> stamp updatedAt -> store
#   disable: default record -> stamp updatedAt -> store
#
# Activation is never evaluated at write time, so an alert with
# a future startAt can be published ahead of its window.
# ------------------------------------------------------------

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable

import structlog

from .activation import evaluate_activation
from .errors import StoreError
from .models import AlertRecord, default_alert, iso_utc, utcnow
from .normalizer import normalize_alert
from .store import AlertStore

logger = structlog.get_logger(__name__)

Clock = Callable[[], datetime]


class AlertService:
    def __init__(self, store: AlertStore, clock: Clock = utcnow):
        self.store = store
        self.clock = clock

    def read_current(self) -> AlertRecord:
        """
        Current alert as readers should see it. Never raises:
        an unreadable store degrades to the default record.
        """
        now = self.clock()
        try:
            raw = self.store.read()
        except StoreError as exc:
            logger.warning("alert read failed, serving default", error=str(exc))
            raw = None

        if raw is None:
            return default_alert()

        record = normalize_alert(raw)
        return evaluate_activation(record, now)

    def publish(self, payload: Any) -> AlertRecord:
        """
        Fully replace the stored alert with `payload`.

        Raises:
            InvalidAlertPayload: unknown level
            StoreError: persistence failed
        """
        record = normalize_alert(payload, strict=True)
        stamp = iso_utc(self.clock())

        if record.level == "none":
            record = default_alert()
        record.updatedAt = stamp

        self.store.write(record)
        logger.info(
            "alert published",
            level=record.level,
            regions=len(record.regions),
            start_at=record.startAt or None,
            end_at=record.endAt or None,
        )
        return record

    def disable(self) -> AlertRecord:
        record = default_alert()
        record.updatedAt = iso_utc(self.clock())
        self.store.write(record)
        logger.info("alert disabled")
        return record
