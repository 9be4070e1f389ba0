"""Test configuration and common fixtures."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.config.settings import Settings

RELAY_ENV = (
    "DISCORD_TOKEN",
    "DISCORD_CHANNEL_ID",
    "TIKTOK_USERNAME",
    "SIGN_SERVER_URL",
    "ENABLE_UPLOAD_CHECK",
    "UPLOAD_CHECK_INTERVAL",
    "RECONNECT_DELAY_SEC",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's environment out of Settings()."""
    for name in RELAY_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_settings():
    def _make(**overrides) -> Settings:
        values = {
            "DISCORD_TOKEN": "test-token",
            "DISCORD_CHANNEL_ID": "123456789",
            "TIKTOK_USERNAME": "creator",
            "METRICS_PORT": 0,
            "API_PORT": 0,
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)
    return _make


@pytest.fixture
def notifier():
    """A notifier double that records every delivered notification."""
    fake = MagicMock()
    fake.notify = AsyncMock(return_value=True)
    return fake


async def wait_until(predicate, attempts: int = 200):
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition not reached")
