import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from src.config.settings import Settings
from src.notifications.discord_sink import DiscordNotifier
from src.notifications.messages import live_notification, upload_notification
from src.orchestration.state import Phase, RelayState
from src.tiktok.live_connector import LiveConnector, LiveEvent, LiveSignal, SessionFactory, TikTokLiveSession
from src.tiktok.poller import UploadPoller
from src.tiktok.profile_client import ProfileClient
from src.tiktok.upload_detector import UploadDetector

log = logging.getLogger(__name__)


class LifecycleController:
    """Owns the relay state and the two background tasks feeding the notifier."""

    def __init__(
        self,
        settings: Settings,
        notifier: DiscordNotifier,
        profile_client: Optional[ProfileClient] = None,
        session_factory: SessionFactory = TikTokLiveSession,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.settings = settings
        self.username = settings.username
        self.notifier = notifier
        self.state = RelayState()
        self.connector = LiveConnector(
            self.username,
            self.state,
            self.handle_live_event,
            sign_server_url=settings.sign_server_url,
            retry_delay=settings.reconnect_delay_sec,
            session_factory=session_factory,
            sleep=sleep,
        )
        self.poller: Optional[UploadPoller] = None
        if settings.enable_upload_check:
            self.poller = UploadPoller(
                profile_client or ProfileClient(timeout=settings.http_timeout_sec),
                self.username,
                UploadDetector(self.state),
                self.announce_upload,
                interval=settings.upload_check_interval_sec,
                sleep=sleep,
            )
        self._tasks: List[asyncio.Task] = []

    @property
    def phase(self) -> Phase:
        return self.state.phase

    def mark_authenticated(self):
        self.state.phase = Phase.AUTHENTICATED

    def mark_failed(self):
        self.state.phase = Phase.FAILED

    def start(self) -> bool:
        """Spawn the live connector and upload poller once; later calls are no-ops."""
        if self.state.phase is Phase.RUNNING:
            return False
        self._spawn(self.connector.run(), "live-connector")
        if self.poller is not None:
            self._spawn(self.poller.run(), "upload-poller")
        else:
            log.info("Upload check disabled")
        self.state.phase = Phase.RUNNING
        return True

    def _spawn(self, coro, name: str):
        task = asyncio.create_task(coro, name=name)
        task.add_done_callback(self._on_task_done)
        self._tasks.append(task)

    @staticmethod
    def _on_task_done(task: asyncio.Task):
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            log.error("Background task %s crashed: %r", task.get_name(), exc)

    async def stop(self):
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()
        await self.connector.teardown()
        if self.poller is not None:
            await self.poller.client.aclose()

    async def handle_live_event(self, event: LiveEvent):
        if event.signal is LiveSignal.STREAM_BEGAN:
            log.info("Stream began in room %s", event.room_id)
            if event.room_id is not None and event.room_id == self.state.announced_room_id:
                log.info("Room %s already announced, skipping", event.room_id)
                return
            self.state.announced_room_id = event.room_id
            await self.announce_live()
        elif event.signal is LiveSignal.STREAM_ENDED:
            log.info("Stream ended in room %s", event.room_id)
        elif event.signal is LiveSignal.STREAM_UPDATED:
            log.debug("Stream update in room %s", event.room_id)
        elif event.signal is LiveSignal.TRANSPORT_ERROR:
            log.warning("TikTok live connection error: %s", event.detail)

    async def announce_live(self) -> bool:
        return await self.notifier.notify(live_notification(self.username))

    async def announce_upload(self, video_id: str) -> bool:
        return await self.notifier.notify(upload_notification(self.username, video_id))
