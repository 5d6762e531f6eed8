"""FIFO matchmaking queue.

No skill or priority matching: the two oldest entries are paired. Pairing
is safe to invoke redundantly (event-driven and periodic sweep) because a
second call simply sees fewer than two entries.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass
class QueueEntry:
    user_id: str
    username: str
    sid: str
    appearance: Any = field(default_factory=dict)
    evolution_level: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'userId': self.user_id,
            'username': self.username,
            'appearance': self.appearance,
            'evolutionLevel': self.evolution_level,
        }


class MatchmakingQueue:
    def __init__(self):
        self._entries: List[QueueEntry] = []

    def enqueue(self, entry: QueueEntry) -> None:
        """Append to the tail, dropping any earlier entry for the same user."""
        self._entries = [e for e in self._entries if e.user_id != entry.user_id]
        self._entries.append(entry)

    def dequeue_pair(self) -> Optional[Tuple[QueueEntry, QueueEntry]]:
        if len(self._entries) < 2:
            return None
        first, second = self._entries[0], self._entries[1]
        del self._entries[:2]
        return first, second

    def remove(self, user_id: str) -> bool:
        before = len(self._entries)
        self._entries = [e for e in self._entries if e.user_id != user_id]
        return len(self._entries) != before

    def remove_by_connection(self, sid: str) -> bool:
        before = len(self._entries)
        self._entries = [e for e in self._entries if e.sid != sid]
        return len(self._entries) != before

    def snapshot(self) -> List[Dict[str, Any]]:
        return [e.to_dict() for e in self._entries]

    def __contains__(self, user_id: str) -> bool:
        return any(e.user_id == user_id for e in self._entries)

    def __len__(self) -> int:
        return len(self._entries)
