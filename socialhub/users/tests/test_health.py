from http import HTTPStatus

import pytest
from asgiref.sync import async_to_sync
from django.db import connection as dj_conn


class DummyDbError(Exception):
    """Synthetic DB error for testing."""


@pytest.mark.django_db
def test_health_ok(client):
    resp = client.get("/health/")
    assert resp.status_code == HTTPStatus.OK
    data = resp.json()
    assert data["status"] == "ok"
    assert data["components"]["db"]["ok"] is True
    assert data["components"]["realtime"] == {"ok": True, "connections": 0}


@pytest.mark.django_db
def test_health_counts_live_connections(client, realtime):
    async_to_sync(realtime.presence.join)("a1", 1)
    async_to_sync(realtime.presence.join)("a2", 1)

    data = client.get("/health/").json()
    assert data["components"]["realtime"]["connections"] == 2  # noqa: PLR2004


@pytest.mark.django_db
def test_health_degraded_when_db_fails(client, monkeypatch):
    msg = "db down"

    def raise_cursor():
        raise DummyDbError(msg)

    monkeypatch.setattr(dj_conn, "cursor", raise_cursor, raising=True)
    resp = client.get("/health/")
    assert resp.status_code == HTTPStatus.SERVICE_UNAVAILABLE
    data = resp.json()
    assert data["components"]["db"]["ok"] is False
    assert data["status"] == "degraded"
