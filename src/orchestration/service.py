import logging
import asyncio
import discord
from prometheus_client import start_http_server
from src.notifications.discord_sink import DiscordNotifier
from src.orchestration.controller import LifecycleController
from src.config.settings import settings
from src.api.server import app, set_controller
import uvicorn

log = logging.getLogger(__name__)

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def configure_logging(log_format: str):
    if log_format == 'json':
        import json, sys
        class JsonFormatter(logging.Formatter):
            def format(self, record):
                base = {
                    'time': self.formatTime(record),
                    'level': record.levelname,
                    'logger': record.name,
                    'msg': record.getMessage(),
                }
                return json.dumps(base, ensure_ascii=False)
        root = logging.getLogger()
        for h in list(root.handlers):
            root.removeHandler(h)
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JsonFormatter())
        root.addHandler(handler)
        root.setLevel(logging.INFO)
    for name in ('discord.http', 'discord.gateway', 'discord.client'):
        logging.getLogger(name).setLevel(logging.WARNING)


class RelayBot(discord.Client):
    def __init__(self):
        intents = discord.Intents.none()
        intents.guilds = True
        super().__init__(intents=intents)
        self.controller = None

    async def on_ready(self):
        log.info("Discord bot ready: %s", self.user)
        # on_ready fires again after gateway reconnects; start() ignores repeats.
        if self.controller is not None:
            self.controller.start()


async def main():
    configure_logging(settings.log_format)
    missing = settings.missing_required()
    if missing:
        log.error("Missing required configuration: %s", ", ".join(missing))
        raise SystemExit(1)

    if settings.metrics_port:
        start_http_server(settings.metrics_port)
    bot = RelayBot()
    notifier = DiscordNotifier(bot, settings.channel_id, footer=settings.embed_footer)
    controller = LifecycleController(settings, notifier)
    bot.controller = controller
    set_controller(controller, settings)

    try:
        await bot.login(settings.discord_token)
    except Exception as e:
        controller.mark_failed()
        log.error("Discord login failed: %s", e)
        await bot.close()
        raise SystemExit(1)
    controller.mark_authenticated()

    async def run_api():
        config = uvicorn.Config(app, host="0.0.0.0", port=settings.api_port, log_level="info", lifespan="on")
        server = uvicorn.Server(config)
        await server.serve()

    # Discord gateway and API server run concurrently; the relay tasks start on ready
    jobs = [bot.connect()]
    if settings.api_port:
        jobs.append(run_api())
    try:
        await asyncio.gather(*jobs)
    finally:
        await controller.stop()
        if not bot.is_closed():
            await bot.close()

if __name__ == "__main__":
    asyncio.run(main())
