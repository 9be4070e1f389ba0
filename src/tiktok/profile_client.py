import logging
import re
from typing import Optional

import httpx

BASE_URL = "https://www.tiktok.com"

PROFILE_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/118.0 Safari/537.36",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}

# Tried in order: a /video/<id> link, then an itemId in the embedded page JSON.
VIDEO_ID_PATTERNS = (
    re.compile(r"/video/(\d+)"),
    re.compile(r'"itemId":"(\d+)"'),
)

log = logging.getLogger(__name__)


def profile_url(username: str) -> str:
    return f"{BASE_URL}/@{username}"


def video_url(username: str, video_id: str) -> str:
    return f"{BASE_URL}/@{username}/video/{video_id}"


def live_url(username: str) -> str:
    return f"{BASE_URL}/@{username}/live"


def extract_latest_video_id(html: str) -> Optional[str]:
    for pattern in VIDEO_ID_PATTERNS:
        m = pattern.search(html)
        if m:
            return m.group(1)
    return None


class ProfileClient:
    def __init__(self, timeout: float = 15, http: Optional[httpx.AsyncClient] = None):
        self._http = http or httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    async def fetch_latest_video_id(self, username: str) -> Optional[str]:
        """Scrape the public profile page for the newest video id.

        A failed request, a non-2xx answer and a page without a recognisable id
        all return None: no information this cycle.
        """
        try:
            r = await self._http.get(profile_url(username), headers=PROFILE_HEADERS)
        except httpx.HTTPError as e:
            log.warning("Profile fetch failed for %s: %s", username, e)
            return None
        if not r.is_success:
            log.warning("Profile fetch for %s returned HTTP %s", username, r.status_code)
            return None
        video_id = extract_latest_video_id(r.text)
        if video_id is None:
            log.debug("No video id found on profile page of %s", username)
        return video_id

    async def aclose(self):
        await self._http.aclose()
