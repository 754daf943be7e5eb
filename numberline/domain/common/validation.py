# numberline/domain/common/validation.py
from __future__ import annotations

from typing import Any, Optional

from numberline.store.models import PlayerStore, RoomStore

NAME_MAX_LEN = 24


def clean_name(raw: Any, default: str) -> str:
    """Strip, cap the length, fall back to `default` when nothing is left."""
    if not isinstance(raw, str):
        return default
    name = raw.strip()[:NAME_MAX_LEN].strip()
    return name or default


def find_player(room: RoomStore, player_id: Optional[str]) -> Optional[PlayerStore]:
    if not player_id:
        return None
    for p in room.players:
        if p.id == player_id:
            return p
    return None


def is_host(player: Optional[PlayerStore], room: RoomStore) -> bool:
    """Check if player is the room's host."""
    return player is not None and player.is_host and room.host_id == player.id


def is_full_permutation(ordered_ids: Any, room: RoomStore) -> bool:
    """
    True when ordered_ids lists every player id of the room exactly once.
    """
    if not isinstance(ordered_ids, list):
        return False
    if len(ordered_ids) != len(room.players):
        return False
    valid = {p.id for p in room.players}
    if not all(isinstance(pid, str) and pid in valid for pid in ordered_ids):
        return False
    return len(set(ordered_ids)) == len(ordered_ids)
