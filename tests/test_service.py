"""Tests for process bootstrap."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from src.api.routes import system as system_routes
from src.orchestration import service
from src.orchestration.controller import LifecycleController
from src.orchestration.state import Phase


@pytest.fixture
def boot(monkeypatch):
    bot_cls = MagicMock()
    metrics_server = MagicMock()
    monkeypatch.setattr(service, "RelayBot", bot_cls)
    monkeypatch.setattr(service, "start_http_server", metrics_server)
    yield bot_cls, metrics_server
    system_routes.set_controller(None)


@pytest.mark.asyncio
@pytest.mark.parametrize("missing", ["DISCORD_TOKEN", "DISCORD_CHANNEL_ID", "TIKTOK_USERNAME"])
async def test_missing_config_exits_before_network(monkeypatch, make_settings, boot, missing):
    bot_cls, metrics_server = boot
    monkeypatch.setattr(service, "settings", make_settings(**{missing: "", "METRICS_PORT": 9100}))

    with pytest.raises(SystemExit) as exc:
        await service.main()

    assert exc.value.code == 1
    bot_cls.assert_not_called()
    metrics_server.assert_not_called()


@pytest.mark.asyncio
async def test_login_failure_exits(monkeypatch, make_settings, boot):
    bot_cls, _ = boot
    bot = bot_cls.return_value
    bot.login = AsyncMock(side_effect=discord.LoginFailure("Improper token has been passed."))
    bot.close = AsyncMock()
    bot.connect = AsyncMock()
    monkeypatch.setattr(service, "settings", make_settings())

    with pytest.raises(SystemExit) as exc:
        await service.main()

    assert exc.value.code == 1
    bot.connect.assert_not_called()
    assert bot.controller.phase is Phase.FAILED


@pytest.mark.asyncio
async def test_successful_login_runs_gateway(monkeypatch, make_settings, boot):
    bot_cls, _ = boot
    bot = bot_cls.return_value
    bot.login = AsyncMock()
    bot.connect = AsyncMock()
    bot.close = AsyncMock()
    bot.is_closed = MagicMock(return_value=False)
    monkeypatch.setattr(service, "settings", make_settings())

    await service.main()

    bot.login.assert_awaited_once_with("test-token")
    bot.connect.assert_awaited_once()
    assert bot.controller.phase is Phase.AUTHENTICATED
    bot.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_repeated_ready_starts_relay_once(make_settings, notifier):
    bot = service.RelayBot()
    controller = LifecycleController(make_settings(), notifier, profile_client=MagicMock(), sleep=AsyncMock())
    controller.connector.run = AsyncMock()
    controller.poller.run = AsyncMock()
    controller.poller.client.aclose = AsyncMock()
    bot.controller = controller
    controller.mark_authenticated()

    await bot.on_ready()
    await bot.on_ready()
    await asyncio.sleep(0)

    assert controller.phase is Phase.RUNNING
    controller.connector.run.assert_awaited_once()
    controller.poller.run.assert_awaited_once()
    await controller.stop()
