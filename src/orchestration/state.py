import enum
from dataclasses import dataclass
from typing import Any, Optional


class Phase(str, enum.Enum):
    BOOTING = "booting"
    AUTHENTICATED = "authenticated"
    RUNNING = "running"
    FAILED = "failed"


@dataclass
class RelayState:
    """Process-wide mutable state.

    Each field has a single writer: ``connection``, ``room_id``, ``connected``
    and ``announced_room_id`` belong to the live connector task,
    ``last_video_id`` to the upload poller.
    """
    phase: Phase = Phase.BOOTING
    connection: Optional[Any] = None
    room_id: Optional[str] = None
    connected: bool = False
    last_video_id: Optional[str] = None
    announced_room_id: Optional[str] = None

    def to_dict(self):
        return {
            "phase": self.phase.value,
            "connected": self.connected,
            "room_id": self.room_id,
            "last_video_id": self.last_video_id,
        }
