"""Pytest fixtures for alerte-meteo tests."""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from alerte_meteo.config import settings
from alerte_meteo.main import create_app
from alerte_meteo.routes._common import get_alert_service, get_alert_store
from alerte_meteo.service import AlertService
from alerte_meteo.store import FileAlertStore


class FixedClock:
    """Injectable clock; tests move it with advance()."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def now() -> datetime:
    return datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(now) -> FixedClock:
    return FixedClock(now)


@pytest.fixture
def file_store(tmp_path) -> FileAlertStore:
    return FileAlertStore(tmp_path / "alert.json")


@pytest.fixture
def service(file_store, clock) -> AlertService:
    return AlertService(file_store, clock=clock)


@pytest.fixture
def admin_settings(monkeypatch):
    """Single admin identity; cookies allowed over the test client's http."""
    monkeypatch.setattr(settings, "admin_user", "admin")
    monkeypatch.setattr(settings, "admin_pass", "s3cret")
    monkeypatch.setattr(settings, "jwt_secret", "test-secret")
    monkeypatch.setattr(settings, "cookie_secure", False)
    return settings


@pytest.fixture
def client(admin_settings, service, file_store):
    """FastAPI TestClient backed by a file store and a fixed clock."""
    app = create_app()

    app.dependency_overrides[get_alert_store] = lambda: file_store
    app.dependency_overrides[get_alert_service] = lambda: service

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def admin_client(client):
    """TestClient already holding a valid admin session cookie."""
    resp = client.post("/api/login", json={"username": "admin", "password": "s3cret"})
    assert resp.status_code == 200
    return client
