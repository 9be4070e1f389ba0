"""Tests for the observability API."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from src.api.server import app, set_controller
from src.api.routes import settings as settings_routes
from src.orchestration.controller import LifecycleController


@pytest.fixture
def client(make_settings, notifier):
    settings = make_settings(SIGN_SERVER_URL="https://sign.example")
    controller = LifecycleController(settings, notifier, profile_client=MagicMock(), sleep=AsyncMock())
    set_controller(controller, settings)
    yield TestClient(app), controller
    set_controller(None, settings_routes.default_settings)


def test_health(client):
    http, _ = client
    assert http.get("/system/health").json() == {"status": "ok"}


def test_status_reflects_state(client):
    http, controller = client
    controller.state.connected = True
    controller.state.room_id = "7001"
    controller.state.last_video_id = "2222"

    body = http.get("/system/status").json()

    assert body == {
        "phase": "booting",
        "creator": "creator",
        "connected": True,
        "room_id": "7001",
        "last_video_id": "2222",
        "upload_check_enabled": True,
    }


def test_status_unavailable_without_controller(client):
    http, _ = client
    set_controller(None)
    assert http.get("/system/status").status_code == 503


def test_settings_hide_token(client):
    http, _ = client
    body = http.get("/settings").json()
    assert body["discord_token_set"] is True
    assert "discord_token" not in body
    assert body["sign_server_url"] == "https://sign.example"
    assert body["discord_channel_id"] == 123456789
