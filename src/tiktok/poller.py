import asyncio
import logging
from typing import Awaitable, Callable, Optional

from .profile_client import ProfileClient
from .upload_detector import UploadDetector
from src.metrics.registry import upload_poll_duration_seconds, upload_poll_errors_total, last_upload_poll_timestamp

log = logging.getLogger(__name__)


class UploadPoller:
    def __init__(
        self,
        client: ProfileClient,
        username: str,
        detector: UploadDetector,
        on_upload: Callable[[str], Awaitable[object]],
        interval: int = 300,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.client = client
        self.username = username
        self.detector = detector
        self.on_upload = on_upload
        self.interval = interval
        self._sleep = sleep

    async def check(self) -> Optional[str]:
        """Run one upload check; returns the video id that was announced, if any."""
        start = asyncio.get_running_loop().time()
        video_id = await self.client.fetch_latest_video_id(self.username)
        upload_poll_duration_seconds.observe(asyncio.get_running_loop().time() - start)
        if video_id is None:
            upload_poll_errors_total.inc()
            return None
        last_upload_poll_timestamp.set_to_current_time()
        if not self.detector.update(video_id):
            return None
        log.info("New upload detected for %s: %s", self.username, video_id)
        await self.on_upload(video_id)
        return video_id

    async def _check_safely(self):
        try:
            await self.check()
        except Exception as e:
            upload_poll_errors_total.inc()
            log.exception("Upload check error for %s: %s", self.username, e)

    async def run(self):
        log.info("Checking %s for new uploads every %ss", self.username, self.interval)
        # First successful result only seeds the last-seen id.
        await self._check_safely()
        if self.detector.last_video_id:
            log.info("Initial latest video id: %s", self.detector.last_video_id)
        while True:
            await self._sleep(self.interval)
            await self._check_safely()
