from http import HTTPStatus
from unittest import mock

import pytest
from django.db import connection as dj_conn

from roamease.realtime.socketio import init_realtime
from roamease.realtime.socketio import shutdown_realtime
from roamease.realtime.tests.fakes import FakePresenceStore
from roamease.realtime.tests.fakes import FakeSocketServer


class DummyDbError(Exception):
    """Synthetic DB error for testing."""


@pytest.fixture(autouse=True)
def _redis_up():
    with mock.patch("config.health.redis.Redis.ping", return_value=True):
        yield


@pytest.mark.django_db
def test_health_ok(client):
    resp = client.get("/health/")
    assert resp.status_code == HTTPStatus.OK
    data = resp.json()
    assert data["status"] == "ok"
    assert data["components"]["db"]["ok"] is True
    assert data["components"]["redis"]["ok"] is True
    assert data["components"]["realtime"] == {"initialized": False, "online_users": 0}


@pytest.mark.django_db
def test_health_without_redis_configured(client, settings):
    settings.REDIS_URL = ""
    resp = client.get("/health/")
    assert resp.status_code == HTTPStatus.OK
    data = resp.json()
    assert data["status"] == "ok"
    assert "redis" not in data["components"]


@pytest.mark.django_db
def test_health_reports_online_users(client):
    gateway = init_realtime(FakeSocketServer(), store=FakePresenceStore())
    gateway.registry.mark_online("1", "sid-1")
    try:
        resp = client.get("/health/")
    finally:
        shutdown_realtime()
    assert resp.json()["components"]["realtime"] == {
        "initialized": True,
        "online_users": 1,
    }


@pytest.mark.django_db
def test_health_degraded_when_redis_fails(client):
    with mock.patch(
        "config.health.redis.Redis.ping",
        side_effect=TimeoutError("redis timeout"),
    ):
        resp = client.get("/health/")
    assert resp.status_code == HTTPStatus.OK
    data = resp.json()
    assert data["components"]["redis"]["ok"] is False
    assert data["status"] == "degraded"


@pytest.mark.django_db
def test_health_down_when_db_fails(client, monkeypatch):
    msg = "db down"

    def raise_cursor():
        raise DummyDbError(msg)

    # Requests run atomically; the view must still answer with JSON.
    monkeypatch.setattr(dj_conn, "cursor", raise_cursor, raising=True)
    resp = client.get("/health/")
    assert resp.status_code == HTTPStatus.SERVICE_UNAVAILABLE
    data = resp.json()
    assert data["status"] == "down"
    assert data["components"]["db"]["ok"] is False
