"""Matchmaking and relay for 1v1 battles.

In-memory only: queue, session directory and connection registry live on a
``BattleServer`` owned by one Flask app. Transport wiring lives in
``blobverse.socketio_events``; durable records in ``blobverse.services.records``.
"""

from .errors import BattleError, MalformedEvent, SessionConflict, SessionNotFound
from .housekeeping import Housekeeping
from .server import BattleServer

__all__ = [
    'BattleError',
    'BattleServer',
    'Housekeeping',
    'MalformedEvent',
    'SessionConflict',
    'SessionNotFound',
]
