"""Relay of gameplay payloads between the two slots of a session.

Payloads are opaque. The only fields read are the round outcome markers
(``gameOver`` plus a winner), used to keep per-slot win counters.
"""

from dataclasses import dataclass
from typing import Any, Optional

from .notify import Notifier
from .sessions import SLOT_A, SLOT_B, SessionManager

_WINNER_ALIASES = {
    'A': SLOT_A, 'a': SLOT_A, 1: SLOT_A, '1': SLOT_A,
    'B': SLOT_B, 'b': SLOT_B, 2: SLOT_B, '2': SLOT_B,
}


@dataclass(frozen=True)
class RoundOutcome:
    game_over: bool
    winner: Optional[str]

    @classmethod
    def from_message(cls, message: Any) -> 'RoundOutcome':
        if not isinstance(message, dict):
            return cls(False, None)
        winner = message.get('winner')
        sync = message.get('syncData')
        if winner is None and isinstance(sync, dict):
            winner = sync.get('winner')
        slot = None
        # bool is an int subclass; True must not alias slot 1
        if isinstance(winner, (str, int)) and not isinstance(winner, bool):
            slot = _WINNER_ALIASES.get(winner)
        return cls(message.get('gameOver') is True, slot)

    @property
    def decided(self) -> bool:
        return self.game_over and self.winner is not None


class MessageRouter:
    def __init__(self, sessions: SessionManager, notifier: Notifier, logger):
        self.sessions = sessions
        self.notifier = notifier
        self.logger = logger

    def handle(self, session_id: str, sender_user_id: str, message: Any) -> None:
        """Apply any round result carried by ``message`` and forward it to the opponent."""
        self.sessions.get(session_id)
        outcome = RoundOutcome.from_message(message)
        if outcome.decided:
            self.record_round_result(session_id, sender_user_id, outcome.winner)
        self.relay(session_id, sender_user_id, message)

    def record_round_result(self, session_id: str, reporting_user_id: str, winner_slot: str) -> bool:
        """Credit ``winner_slot`` only when the report comes from that slot's own user."""
        session = self.sessions.get(session_id)
        slot = session.slot(winner_slot)
        if slot is None or slot.user_id != reporting_user_id:
            self.logger.info(
                f"[round-ignored] session={session_id} winner={winner_slot} reported by user={reporting_user_id}"
            )
            return False
        slot.wins += 1
        self.logger.info(
            f"[round-won] session={session_id} slot={winner_slot} ({slot.username}) total wins={slot.wins}"
        )
        state = session.win_state()
        for target in (session.slot_a, session.slot_b):
            if target is not None:
                self.notifier.send(target.sid, 'BATTLE_WIN_STATE', state)
        return True

    def relay(self, session_id: str, sender_user_id: str, payload: Any) -> bool:
        session = self.sessions.get(session_id)
        recipient = session.opponent_of(sender_user_id)
        if recipient is None:
            self.logger.info(f"[relay-drop] session={session_id} sender={sender_user_id} has no opponent")
            return False
        if isinstance(payload, dict):
            if payload.get('playAgainRequest'):
                self.logger.info(f"[relay] session={session_id} play again request from {sender_user_id}")
            if payload.get('startCountdown'):
                self.logger.info(f"[relay] session={session_id} countdown started by {sender_user_id}")
        return self.notifier.send(recipient.sid, 'BATTLE_MESSAGE', {
            'message': payload,
            'senderId': sender_user_id,
        })
