"""Tests for alert document persistence."""

import json
from unittest.mock import MagicMock

import pytest
import redis

from alerte_meteo.errors import StoreError
from alerte_meteo.models import AlertRecord
from alerte_meteo.store import FileAlertStore, RedisAlertStore


def _record() -> AlertRecord:
    return AlertRecord(
        active=True,
        level="orange",
        regions=["Béjaïa", "Jijel"],
        region="Béjaïa",
        title="Pluies",
        updatedAt="2026-01-15T12:00:00.000Z",
    )


class TestFileAlertStore:
    def test_read_before_write_is_none(self, tmp_path):
        assert FileAlertStore(tmp_path / "alert.json").read() is None

    def test_write_then_read(self, tmp_path):
        store = FileAlertStore(tmp_path / "alert.json")
        store.write(_record())
        assert store.read() == _record().model_dump()

    def test_file_is_readable_json(self, tmp_path):
        path = tmp_path / "alert.json"
        FileAlertStore(path).write(_record())
        text = path.read_text(encoding="utf-8")
        assert "Béjaïa" in text
        assert json.loads(text)["level"] == "orange"

    def test_write_replaces_whole_document(self, tmp_path):
        store = FileAlertStore(tmp_path / "alert.json")
        store.write(_record())
        store.write(AlertRecord(updatedAt="later"))
        assert store.read()["regions"] == []

    def test_creates_parent_directory(self, tmp_path):
        store = FileAlertStore(tmp_path / "nested" / "alert.json")
        store.write(_record())
        assert store.read() is not None

    def test_no_temp_files_left(self, tmp_path):
        FileAlertStore(tmp_path / "alert.json").write(_record())
        assert [p.name for p in tmp_path.iterdir()] == ["alert.json"]

    @pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
    def test_corrupt_document_raises(self, tmp_path, content):
        path = tmp_path / "alert.json"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(StoreError):
            FileAlertStore(path).read()

    def test_invalid_utf8_raises(self, tmp_path):
        path = tmp_path / "alert.json"
        path.write_bytes(b'{"level": "red", "title": "\xff\xfe"}')
        with pytest.raises(StoreError):
            FileAlertStore(path).read()

    def test_write_failure_raises(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("x", encoding="utf-8")
        # parent path is a regular file
        with pytest.raises(StoreError):
            FileAlertStore(blocker / "alert.json").write(_record())

    def test_ping(self, tmp_path):
        assert FileAlertStore(tmp_path / "alert.json").ping() is True


class TestRedisAlertStore:
    def test_read_missing_key(self):
        r = MagicMock()
        r.get.return_value = None
        assert RedisAlertStore(r).read() is None
        r.get.assert_called_once_with("alert:current")

    def test_write_serializes_record(self):
        r = MagicMock()
        RedisAlertStore(r, key="k").write(_record())
        key, raw = r.set.call_args.args
        assert key == "k"
        assert json.loads(raw)["regions"] == ["Béjaïa", "Jijel"]

    def test_read_decodes_json(self):
        r = MagicMock()
        r.get.return_value = _record().model_dump_json()
        assert RedisAlertStore(r).read()["level"] == "orange"

    def test_connection_error_on_read(self):
        r = MagicMock()
        r.get.side_effect = redis.ConnectionError("down")
        with pytest.raises(StoreError):
            RedisAlertStore(r).read()

    def test_undecodable_value_on_read(self):
        r = MagicMock()
        r.get.side_effect = UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")
        with pytest.raises(StoreError):
            RedisAlertStore(r).read()

    def test_connection_error_on_write(self):
        r = MagicMock()
        r.set.side_effect = redis.ConnectionError("down")
        with pytest.raises(StoreError):
            RedisAlertStore(r).write(_record())

    def test_ping_failure(self):
        r = MagicMock()
        r.ping.side_effect = redis.ConnectionError("down")
        assert RedisAlertStore(r).ping() is False
