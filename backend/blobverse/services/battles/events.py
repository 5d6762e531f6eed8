"""Inbound client events.

Every frame received on the ``message`` channel is parsed into exactly one
of the event classes below. ``EVENT_TYPES`` is the closed set of kinds the
server understands; anything else is rejected as malformed.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .errors import MalformedEvent

DEFAULT_USERNAME = 'Anonymous'


def _required(data: Dict[str, Any], *names: str) -> Any:
    for name in names:
        value = data.get(name)
        if value not in (None, ''):
            return value
    raise MalformedEvent(f"{data.get('type')} requires {names[0]}")


def _optional(data: Dict[str, Any], *names: str) -> Any:
    for name in names:
        if data.get(name) not in (None, ''):
            return data[name]
    return None


def _appearance(data: Dict[str, Any]) -> Any:
    appearance = data.get('appearance')
    return appearance if appearance is not None else {}


@dataclass(frozen=True)
class JoinQueue:
    user_id: str
    username: str = DEFAULT_USERNAME
    appearance: Any = field(default_factory=dict)
    evolution_level: Optional[int] = None

    @classmethod
    def from_payload(cls, data):
        return cls(
            user_id=str(_required(data, 'userId')),
            username=data.get('username') or DEFAULT_USERNAME,
            appearance=_appearance(data),
            evolution_level=data.get('evolutionLevel'),
        )


@dataclass(frozen=True)
class LeaveQueue:
    user_id: str

    @classmethod
    def from_payload(cls, data):
        return cls(user_id=str(_required(data, 'userId')))


@dataclass(frozen=True)
class GetQueue:
    @classmethod
    def from_payload(cls, data):
        return cls()


@dataclass(frozen=True)
class CreateBattle:
    user_id: str
    code: Optional[str] = None
    username: str = DEFAULT_USERNAME
    appearance: Any = field(default_factory=dict)

    @classmethod
    def from_payload(cls, data):
        code = _optional(data, 'code', 'battleId')
        return cls(
            user_id=str(_required(data, 'userId')),
            code=str(code).upper() if code is not None else None,
            username=data.get('username') or DEFAULT_USERNAME,
            appearance=_appearance(data),
        )


@dataclass(frozen=True)
class JoinBattle:
    user_id: str
    code: str
    username: str = DEFAULT_USERNAME
    appearance: Any = field(default_factory=dict)

    @classmethod
    def from_payload(cls, data):
        return cls(
            user_id=str(_required(data, 'userId')),
            code=str(_required(data, 'code', 'battleId')).upper(),
            username=data.get('username') or DEFAULT_USERNAME,
            appearance=_appearance(data),
        )


@dataclass(frozen=True)
class SendBattleMessage:
    session_id: str
    user_id: str
    message: Any

    @classmethod
    def from_payload(cls, data):
        if 'message' not in data:
            raise MalformedEvent('SEND_BATTLE_MESSAGE requires message')
        return cls(
            session_id=str(_required(data, 'sessionId', 'battleId')),
            user_id=str(_required(data, 'userId')),
            message=data['message'],
        )


@dataclass(frozen=True)
class LeaveBattle:
    session_id: str
    user_id: str

    @classmethod
    def from_payload(cls, data):
        return cls(
            session_id=str(_required(data, 'sessionId', 'battleId')),
            user_id=str(_required(data, 'userId')),
        )


@dataclass(frozen=True)
class Ping:
    @classmethod
    def from_payload(cls, data):
        return cls()


EVENT_TYPES = {
    'JOIN_QUEUE': JoinQueue,
    'LEAVE_QUEUE': LeaveQueue,
    'GET_QUEUE': GetQueue,
    'CREATE_BATTLE': CreateBattle,
    'JOIN_BATTLE': JoinBattle,
    'SEND_BATTLE_MESSAGE': SendBattleMessage,
    'LEAVE_BATTLE': LeaveBattle,
    'PING': Ping,
}

# Frames too chatty to log on receipt
QUIET_EVENTS = (GetQueue, Ping)


def parse_event(data):
    """Turn a raw inbound frame into an event instance or raise MalformedEvent."""
    if not isinstance(data, dict):
        raise MalformedEvent(f'frame is not an object: {type(data).__name__}')
    event_cls = EVENT_TYPES.get(data.get('type'))
    if event_cls is None:
        raise MalformedEvent(f"unknown event type {data.get('type')!r}")
    return event_cls.from_payload(data)
