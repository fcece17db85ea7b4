# alerte_meteo/store.py
# ------------------------------------------------------------
# Alert document persistence.
#
# Exactly one document is kept: the current alert. Every write
# is a full replace (last write wins, no history, no locking).
#
# Backends:
# - RedisAlertStore -> JSON string under one key (default)
# - FileAlertStore  -> pretty-printed JSON file, atomic replace
# ------------------------------------------------------------

from __future__ import annotations

import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

import redis
import structlog

from .config import settings
from .errors import StoreError
from .models import AlertRecord
from .redis_client import get_redis

logger = structlog.get_logger(__name__)


class AlertStore(ABC):
    """
    read()  -> raw stored document, or None if nothing was ever written
    write() -> full replace of the stored document
    """

    @abstractmethod
    def read(self) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    def write(self, record: AlertRecord) -> None:
        ...

    @abstractmethod
    def ping(self) -> bool:
        ...


def _decode(raw: str) -> Dict[str, Any]:
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise StoreError(f"stored alert is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise StoreError("stored alert is not a JSON object")
    return data


class RedisAlertStore(AlertStore):
    def __init__(self, r: redis.Redis, key: str = "alert:current"):
        self.r = r
        self.key = key

    def read(self) -> Optional[Dict[str, Any]]:
        try:
            raw = self.r.get(self.key)
        except redis.RedisError as exc:
            raise StoreError(f"redis read failed: {exc}") from exc
        except UnicodeDecodeError as exc:
            # decode_responses=True decodes inside get()
            raise StoreError(f"stored alert is not valid UTF-8: {exc}") from exc
        if raw is None:
            return None
        return _decode(raw)

    def write(self, record: AlertRecord) -> None:
        try:
            self.r.set(self.key, record.model_dump_json())
        except redis.RedisError as exc:
            raise StoreError(f"redis write failed: {exc}") from exc

    def ping(self) -> bool:
        try:
            return bool(self.r.ping())
        except redis.RedisError:
            return False


class FileAlertStore(AlertStore):
    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)

    def read(self) -> Optional[Dict[str, Any]]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StoreError(f"alert file read failed: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise StoreError(f"alert file is not valid UTF-8: {exc}") from exc
        return _decode(raw)

    def write(self, record: AlertRecord) -> None:
        payload = json.dumps(record.model_dump(), indent=2, ensure_ascii=False)
        directory = self.path.parent if str(self.path.parent) else Path(".")
        tmp = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            # write next to the target then rename: readers never see half a file
            fd, tmp = tempfile.mkstemp(dir=directory, prefix=".alert-", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp, self.path)
        except OSError as exc:
            if tmp and os.path.exists(tmp):
                os.unlink(tmp)
            raise StoreError(f"alert file write failed: {exc}") from exc

    def ping(self) -> bool:
        directory = self.path.parent if str(self.path.parent) else Path(".")
        return os.access(directory, os.W_OK)


def get_store() -> AlertStore:
    """
    Build the store configured by settings.store_backend.
    """
    if settings.store_backend == "file":
        logger.debug("using file alert store", path=settings.alert_file_path)
        return FileAlertStore(settings.alert_file_path)
    return RedisAlertStore(get_redis(), key=settings.alert_key)
