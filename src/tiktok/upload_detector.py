from typing import Optional

from src.orchestration.state import RelayState


class UploadDetector:
    def __init__(self, state: RelayState):
        self._state = state

    @property
    def last_video_id(self) -> Optional[str]:
        return self._state.last_video_id

    def update(self, video_id: Optional[str]) -> bool:
        """Record a poll result; True means a new upload should be announced.

        The first id ever seen only seeds the state, and a miss (None) leaves
        the stored id alone.
        """
        if video_id is None:
            return False
        prev = self._state.last_video_id
        if prev == video_id:
            return False
        self._state.last_video_id = video_id
        return prev is not None
