from typing import Dict, Optional


class ConnectionRegistry:
    """Live connection handles and the user identity last asserted on each."""

    def __init__(self):
        self._identity: Dict[str, Optional[str]] = {}

    def connect(self, sid: str) -> None:
        self._identity[sid] = None

    def disconnect(self, sid: str) -> Optional[str]:
        return self._identity.pop(sid, None)

    def assert_identity(self, sid: str, user_id: str) -> None:
        # Frames can race a disconnect; only track handles that are still live
        if sid in self._identity:
            self._identity[sid] = user_id

    def user_for(self, sid: str) -> Optional[str]:
        return self._identity.get(sid)

    def is_live(self, sid: Optional[str]) -> bool:
        return sid is not None and sid in self._identity

    def __len__(self) -> int:
        return len(self._identity)
