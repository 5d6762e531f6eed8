"""Persistence gateway for player profiles and finished battles.

Live battle state never comes through here; only what should outlive a
process restart.
"""

import time
import uuid
from typing import Any, Dict, List, Optional

from blobverse import db
from blobverse.models import BattleRecord, Profile

RECENT_BATTLES_LIMIT = 10


def _now_ms() -> int:
    return int(time.time() * 1000)


def get_profile(user_id: str) -> Optional[Profile]:
    return Profile.query.filter_by(user_id=user_id).first()


def save_profile(data: Dict[str, Any]) -> Profile:
    """Insert or update a profile by userId, refreshing its last-active time."""
    profile = get_profile(data['userId'])
    if profile is None:
        profile = Profile(user_id=data['userId'])
    profile.username = data['username']
    profile.wins = int(data.get('wins', profile.wins or 0))
    profile.losses = int(data.get('losses', profile.losses or 0))
    profile.evolution_level = int(data.get('evolutionLevel', profile.evolution_level or 0))
    profile.last_active = _now_ms()
    db.session.add(profile)
    db.session.commit()
    return profile


def record_battle(data: Dict[str, Any]) -> str:
    record = BattleRecord(
        id=data.get('id') or str(uuid.uuid4()),
        player1=data['player1'],
        player2=data['player2'],
        winner=data.get('winner'),
        date=int(data.get('date') or _now_ms()),
    )
    record.move_list = data.get('moves') or []
    db.session.add(record)
    db.session.commit()
    return record.id


def get_recent_battles(limit: int = RECENT_BATTLES_LIMIT) -> List[BattleRecord]:
    return BattleRecord.query.order_by(BattleRecord.date.desc()).limit(limit).all()
