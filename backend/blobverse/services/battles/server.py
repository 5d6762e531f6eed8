"""Per-app battle server context.

Owns the registry, queue and session directory for one Flask app and is the
single entry point for inbound events, disconnects and timer ticks. All of
them run under one re-entrant lock so each completes before the next starts,
whatever Socket.IO async mode is in use.
"""

import threading
from typing import Any, Dict

from .connections import ConnectionRegistry
from .errors import BattleError, MalformedEvent
from .events import (
    EVENT_TYPES,
    QUIET_EVENTS,
    CreateBattle,
    GetQueue,
    JoinBattle,
    JoinQueue,
    LeaveBattle,
    LeaveQueue,
    Ping,
    SendBattleMessage,
    parse_event,
)
from .matchmaking import MatchmakingQueue, QueueEntry
from .notify import Notifier
from .router import MessageRouter
from .sessions import SessionManager, Slot


class BattleServer:
    def __init__(self, socketio, logger, namespace: str = '/'):
        self.logger = logger
        self.registry = ConnectionRegistry()
        self.notifier = Notifier(socketio, self.registry, logger, namespace=namespace)
        self.queue = MatchmakingQueue()
        self.sessions = SessionManager(self.notifier, logger)
        self.router = MessageRouter(self.sessions, self.notifier, logger)
        self._lock = threading.RLock()
        self._handlers = {
            JoinQueue: self._on_join_queue,
            LeaveQueue: self._on_leave_queue,
            GetQueue: self._on_get_queue,
            CreateBattle: self._on_create_battle,
            JoinBattle: self._on_join_battle,
            SendBattleMessage: self._on_send_battle_message,
            LeaveBattle: self._on_leave_battle,
            Ping: self._on_ping,
        }
        missing = set(EVENT_TYPES.values()) - set(self._handlers)
        if missing:
            raise RuntimeError(f"No handler for events: {sorted(c.__name__ for c in missing)}")

    # ---- Connection lifecycle ----

    def handle_connect(self, sid: str) -> None:
        with self._lock:
            self.registry.connect(sid)
            self.logger.info(f"[connect] sid={sid}")

    def handle_disconnect(self, sid: str) -> None:
        """Drop every queue entry and end every session that references ``sid``."""
        with self._lock:
            self.registry.disconnect(sid)
            self.logger.info(f"[disconnect] sid={sid}")
            if self.queue.remove_by_connection(sid):
                self._queue_changed()
            for session in self.sessions.active():
                slot = session.slot_with_connection(sid)
                if slot is not None:
                    self.sessions.leave_session(session.session_id, slot.user_id)

    # ---- Inbound events ----

    def handle_message(self, sid: str, data: Any) -> None:
        try:
            event = parse_event(data)
        except MalformedEvent as exc:
            self.logger.warning(f"[event-ignored] sid={sid} {exc}")
            return
        with self._lock:
            user_id = getattr(event, 'user_id', None)
            if user_id is not None:
                self.registry.assert_identity(sid, user_id)
            if not isinstance(event, QUIET_EVENTS):
                self.logger.info(f"[event] {type(event).__name__} from user={user_id} sid={sid}")
            try:
                self._handlers[type(event)](sid, event)
            except BattleError as exc:
                self.logger.info(f"[event-error] {type(event).__name__} user={user_id}: {exc.message}")
                self.notifier.send(sid, 'ERROR', {'error': exc.message})

    def _on_join_queue(self, sid: str, event: JoinQueue) -> None:
        self.queue.enqueue(QueueEntry(
            user_id=event.user_id,
            username=event.username,
            sid=sid,
            appearance=event.appearance,
            evolution_level=event.evolution_level,
        ))
        self.logger.info(f"[queue-join] {event.username} ({event.user_id}) queue={len(self.queue)}")
        self._queue_changed()

    def _on_leave_queue(self, sid: str, event: LeaveQueue) -> None:
        if self.queue.remove(event.user_id):
            self.logger.info(f"[queue-leave] user={event.user_id} queue={len(self.queue)}")
            self._queue_changed()

    def _on_get_queue(self, sid: str, event: GetQueue) -> None:
        self.notifier.send(sid, 'QUEUE_UPDATE', {'queue': self.queue.snapshot()})

    def _on_create_battle(self, sid: str, event: CreateBattle) -> None:
        initiator = Slot(user_id=event.user_id, username=event.username, sid=sid, appearance=event.appearance)
        session = self.sessions.create_session(initiator, event.code)
        self.notifier.send(sid, 'BATTLE_CODE_GENERATED', {'code': session.code, 'sessionId': session.session_id})

    def _on_join_battle(self, sid: str, event: JoinBattle) -> None:
        joiner = Slot(user_id=event.user_id, username=event.username, sid=sid, appearance=event.appearance)
        self.sessions.join_session(event.code, joiner)

    def _on_send_battle_message(self, sid: str, event: SendBattleMessage) -> None:
        self.router.handle(event.session_id, event.user_id, event.message)

    def _on_leave_battle(self, sid: str, event: LeaveBattle) -> None:
        self.sessions.leave_session(event.session_id, event.user_id)

    def _on_ping(self, sid: str, event: Ping) -> None:
        self.notifier.send(sid, 'PONG')

    # ---- Matchmaking ----

    def _queue_changed(self) -> None:
        self.broadcast_queue()
        self.process_matchmaking()

    def broadcast_queue(self) -> None:
        self.notifier.broadcast('QUEUE_UPDATE', {'queue': self.queue.snapshot()})

    def process_matchmaking(self) -> int:
        """Pair queued players two at a time; returns the number of sessions formed."""
        with self._lock:
            formed = 0
            pair = self.queue.dequeue_pair()
            while pair is not None:
                self.sessions.create_from_pair(*pair)
                formed += 1
                pair = self.queue.dequeue_pair()
            if formed:
                self.broadcast_queue()
            return formed

    # ---- Observability ----

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {
                'connections': len(self.registry),
                'queue': len(self.queue),
                'battles': len(self.sessions),
            }
