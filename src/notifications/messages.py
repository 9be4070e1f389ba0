from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from src.tiktok.profile_client import live_url, video_url

LIVE = "live"
UPLOAD = "upload"


@dataclass
class Notification:
    kind: str
    title: str
    url: str
    description: str
    timestamp: datetime
    mention: Optional[str] = None


def _now() -> datetime:
    return datetime.now(timezone.utc)


def live_notification(username: str, when: Optional[datetime] = None) -> Notification:
    return Notification(
        kind=LIVE,
        title=f"{username} is LIVE on TikTok!",
        url=live_url(username),
        description=f"🔴 {username} just started a live stream!\nClick to watch.",
        timestamp=when or _now(),
        mention="@here",
    )


def upload_notification(username: str, video_id: str, when: Optional[datetime] = None) -> Notification:
    url = video_url(username, video_id)
    return Notification(
        kind=UPLOAD,
        title=f"{username} uploaded a new video!",
        url=url,
        description=f"✨ A new video has been uploaded. [Watch here]({url})",
        timestamp=when or _now(),
    )
