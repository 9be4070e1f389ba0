import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from TikTokLive import TikTokLiveClient
from TikTokLive.client.web.web_settings import WebDefaults
from TikTokLive.events import ConnectEvent, LiveEndEvent, RoomUserSeqEvent

from src.orchestration.state import RelayState
from src.metrics.registry import live_connect_attempts_total, live_connect_failures_total, live_connected, live_signals_total

log = logging.getLogger(__name__)


class LiveSignal(str, enum.Enum):
    STREAM_BEGAN = "stream_began"
    STREAM_ENDED = "stream_ended"
    STREAM_UPDATED = "stream_updated"
    TRANSPORT_ERROR = "transport_error"


@dataclass
class LiveEvent:
    signal: LiveSignal
    room_id: Optional[str] = None
    detail: Any = None


EventSink = Callable[[LiveEvent], Awaitable[None]]


class TikTokLiveSession:
    """One push connection to a creator's live room, translated into LiveEvents."""

    def __init__(self, username: str, emit: EventSink, sign_server_url: str = ""):
        if sign_server_url:
            WebDefaults.tiktok_sign_url = sign_server_url
        self._emit = emit
        self._task: Optional[asyncio.Task] = None
        self._client = TikTokLiveClient(unique_id=f"@{username}")
        self._client.add_listener(ConnectEvent, self._on_connect)
        self._client.add_listener(LiveEndEvent, self._on_live_end)
        self._client.add_listener(RoomUserSeqEvent, self._on_room_user_seq)

    @property
    def room_id(self) -> Optional[str]:
        room_id = self._client.room_id
        return str(room_id) if room_id else None

    async def start(self) -> Optional[str]:
        self._task = await self._client.start()
        return self.room_id

    async def wait(self):
        """Block until the connection closes; a crash is reported as a transport error."""
        if self._task is None:
            return
        try:
            await self._task
        except asyncio.CancelledError:
            raise
        except Exception as e:
            await self._emit(LiveEvent(LiveSignal.TRANSPORT_ERROR, self.room_id, e))

    async def disconnect(self):
        await self._client.disconnect(close_client=True)

    async def _on_connect(self, event: ConnectEvent):
        await self._emit(LiveEvent(LiveSignal.STREAM_BEGAN, str(event.room_id) if event.room_id else self.room_id))

    async def _on_live_end(self, event: LiveEndEvent):
        await self._emit(LiveEvent(LiveSignal.STREAM_ENDED, self.room_id))

    async def _on_room_user_seq(self, event: RoomUserSeqEvent):
        await self._emit(LiveEvent(LiveSignal.STREAM_UPDATED, self.room_id, event))


SessionFactory = Callable[[str, EventSink, str], Any]


class LiveConnector:
    """Keeps one push connection to the creator's live room and retries forever.

    A failed connect or a closed session is followed by a reconnect after a
    fixed delay. Mid-session transport errors are only logged.
    """

    def __init__(
        self,
        username: str,
        state: RelayState,
        on_event: EventSink,
        sign_server_url: str = "",
        retry_delay: int = 30,
        session_factory: SessionFactory = TikTokLiveSession,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.username = username
        self.state = state
        self.on_event = on_event
        self.sign_server_url = sign_server_url
        self.retry_delay = retry_delay
        self._session_factory = session_factory
        self._sleep = sleep

    def _set_connected(self, connected: bool):
        self.state.connected = connected
        live_connected.set(1 if connected else 0)

    async def _disconnect_quietly(self, session):
        try:
            await session.disconnect()
        except Exception as e:
            log.debug("Ignoring error while closing live session: %s", e)

    async def teardown(self):
        session = self.state.connection
        self.state.connection = None
        self.state.room_id = None
        self._set_connected(False)
        if session is not None:
            await self._disconnect_quietly(session)

    async def connect(self):
        """Make one connection attempt; raises if the room cannot be joined."""
        await self.teardown()
        if self.sign_server_url:
            log.info("Using sign server: %s", self.sign_server_url)
        session = self._session_factory(self.username, self.dispatch, self.sign_server_url)
        live_connect_attempts_total.inc()
        log.info("Connecting to TikTok live of %s", self.username)
        try:
            room_id = await session.start()
        except Exception:
            live_connect_failures_total.inc()
            self._set_connected(False)
            await self._disconnect_quietly(session)
            raise
        self.state.connection = session
        self.state.room_id = room_id
        self._set_connected(True)
        log.info("Connected to live room %s", room_id)
        return session

    async def dispatch(self, event: LiveEvent):
        live_signals_total.labels(signal=event.signal.value).inc()
        if event.signal is LiveSignal.STREAM_ENDED:
            self._set_connected(False)
        try:
            await self.on_event(event)
        except Exception as e:
            log.exception("Live event handler failed for %s: %s", event.signal.value, e)

    async def run(self):
        while True:
            try:
                session = await self.connect()
            except Exception as e:
                log.error("Failed to connect to TikTok live of %s: %s", self.username, e)
            else:
                await session.wait()
                log.info("Live connection to %s closed", self.username)
                self._set_connected(False)
            log.info("Reconnecting in %ss", self.retry_delay)
            await self._sleep(self.retry_delay)
