"""Battle sessions and their lifecycle.

A session is CREATED (coded, waiting for a second player), ACTIVE (both
slots filled) or gone. Pairing from the queue creates sessions directly in
the ACTIVE state. Removal is final: a removed session id is never found
again and nothing is archived here.
"""

import random
import string
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .errors import SessionConflict, SessionNotFound
from .matchmaking import QueueEntry
from .notify import Notifier

SLOT_A = 'A'
SLOT_B = 'B'

CREATED_VIA_PAIRED = 'paired'
CREATED_VIA_CODED = 'coded'

CODE_LENGTH = 6


def generate_battle_code(taken, length=CODE_LENGTH):
    """Generate a short join code not present in ``taken``."""
    while True:
        code = ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))
        if code not in taken:
            return code


@dataclass
class Slot:
    user_id: str
    username: str
    sid: str
    appearance: Any = field(default_factory=dict)
    wins: int = 0

    @classmethod
    def from_entry(cls, entry: QueueEntry) -> 'Slot':
        return cls(user_id=entry.user_id, username=entry.username, sid=entry.sid, appearance=entry.appearance)


@dataclass
class BattleSession:
    session_id: str
    code: str
    slot_a: Slot
    slot_b: Optional[Slot] = None
    started: bool = False
    created_via: str = CREATED_VIA_CODED

    def slot(self, name: str) -> Optional[Slot]:
        return self.slot_a if name == SLOT_A else self.slot_b

    def slot_name_for(self, user_id: str) -> Optional[str]:
        if self.slot_a.user_id == user_id:
            return SLOT_A
        if self.slot_b is not None and self.slot_b.user_id == user_id:
            return SLOT_B
        return None

    def opponent_of(self, user_id: str) -> Optional[Slot]:
        """The slot that is not ``user_id``'s; None when absent or not a participant."""
        name = self.slot_name_for(user_id)
        if name == SLOT_A:
            return self.slot_b
        if name == SLOT_B:
            return self.slot_a
        return None

    def slot_with_connection(self, sid: str) -> Optional[Slot]:
        for slot in (self.slot_a, self.slot_b):
            if slot is not None and slot.sid == sid:
                return slot
        return None

    def start(self, joiner: Slot) -> None:
        if self.started:
            raise SessionConflict('Battle already started')
        self.slot_b = joiner
        self.started = True

    def win_state(self) -> Dict[str, int]:
        return {
            'slotAWins': self.slot_a.wins,
            'slotBWins': self.slot_b.wins if self.slot_b else 0,
        }

    @property
    def state(self) -> str:
        return 'ACTIVE' if self.started else 'CREATED'


class SessionManager:
    """Session directory plus every operation that mutates it."""

    def __init__(self, notifier: Notifier, logger):
        self.notifier = notifier
        self.logger = logger
        self._sessions: Dict[str, BattleSession] = {}

    def get(self, session_id: str) -> BattleSession:
        session = self._sessions.get(session_id)
        if session is None:
            # coded sessions are keyed by their upper-cased join code
            coded = self._sessions.get(session_id.upper())
            if coded is not None and coded.created_via == CREATED_VIA_CODED:
                session = coded
        if session is None:
            raise SessionNotFound('Battle not found')
        return session

    def active(self) -> List[BattleSession]:
        return list(self._sessions.values())

    def _taken_codes(self):
        return set(self._sessions) | {s.code for s in self._sessions.values()}

    def create_session(self, initiator: Slot, code: Optional[str] = None) -> BattleSession:
        taken = self._taken_codes()
        if code is None:
            code = generate_battle_code(taken)
        elif code in taken:
            raise SessionConflict(f'Battle code {code} is already in use')
        session = BattleSession(session_id=code, code=code, slot_a=initiator)
        self._sessions[session.session_id] = session
        self.logger.info(f"[battle-create] session={code} user={initiator.user_id} ({initiator.username})")
        return session

    def create_from_pair(self, first: QueueEntry, second: QueueEntry) -> BattleSession:
        session_id = str(uuid.uuid4())
        session = BattleSession(
            session_id=session_id,
            code=session_id,
            slot_a=Slot.from_entry(first),
            slot_b=Slot.from_entry(second),
            started=True,
            created_via=CREATED_VIA_PAIRED,
        )
        self._sessions[session.session_id] = session
        self.logger.info(
            f"[match] session={session.session_id} {first.username} ({first.user_id}) vs {second.username} ({second.user_id})"
        )
        self._announce_match(session)
        return session

    def join_session(self, code: str, joiner: Slot) -> BattleSession:
        session = next(
            (s for s in self._sessions.values() if s.created_via == CREATED_VIA_CODED and s.code == code), None
        )
        if session is None:
            raise SessionNotFound('Invalid battle code')
        session.start(joiner)
        self.logger.info(f"[battle-join] session={session.session_id} user={joiner.user_id} ({joiner.username})")
        self._announce_match(session)
        return session

    def leave_session(self, session_id: str, user_id: str) -> BattleSession:
        session = self.get(session_id)
        opponent = session.opponent_of(user_id)
        if opponent is not None:
            self.notifier.send(opponent.sid, 'OPPONENT_DISCONNECTED')
        del self._sessions[session.session_id]
        self.logger.info(f"[battle-end] session={session.session_id} left by user={user_id}")
        return session

    def _announce_match(self, session: BattleSession) -> None:
        for viewer, other in ((session.slot_a, session.slot_b), (session.slot_b, session.slot_a)):
            self.notifier.send(viewer.sid, 'MATCH_FOUND', {
                'sessionId': session.session_id,
                'opponentName': other.username,
                'opponentAppearance': other.appearance,
            })

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
