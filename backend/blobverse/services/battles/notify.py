from typing import Any, Optional

from .connections import ConnectionRegistry


class Notifier:
    """Fire-and-forget outbound events over a Socket.IO server.

    Sends to a handle that is no longer registered are dropped and logged;
    the caller is never told.
    """

    def __init__(self, socketio, registry: ConnectionRegistry, logger, namespace: str = '/'):
        self.socketio = socketio
        self.registry = registry
        self.logger = logger
        self.namespace = namespace

    def send(self, sid: Optional[str], event: str, data: Any = None) -> bool:
        if not self.registry.is_live(sid):
            self.logger.info(f"[delivery-gap] event={event} sid={sid} not connected")
            return False
        if data is None:
            self.socketio.emit(event, to=sid, namespace=self.namespace)
        else:
            self.socketio.emit(event, data, to=sid, namespace=self.namespace)
        return True

    def broadcast(self, event: str, data: Any) -> None:
        self.socketio.emit(event, data, namespace=self.namespace)
