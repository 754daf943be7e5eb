# numberline/store/memory_repo.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from numberline.store.models import PlayerStore, RoomStore

logger = logging.getLogger(__name__)


class MemoryRepo:
    """
    Process-local room registry: room_code -> RoomStore.

    The async API mirrors a networked store so handlers do not care what backs
    them, but no method ever suspends. A handler that only awaits this repo
    therefore runs its validate -> mutate sequence without interleaving.

    Rooms returned by get_room() are the live objects, not copies.
    """

    def __init__(self) -> None:
        self._rooms: Dict[str, RoomStore] = {}

    def __len__(self) -> int:
        return len(self._rooms)

    def has_code(self, room_code: str) -> bool:
        return room_code in self._rooms

    # ----------------------------
    # Rooms
    # ----------------------------
    async def create_room(self, room: RoomStore) -> None:
        if room.code in self._rooms:
            raise KeyError(f"Room {room.code} already exists")
        self._rooms[room.code] = room
        logger.debug("repo: stored room %s", room.code)

    async def get_room(self, room_code: str) -> Optional[RoomStore]:
        return self._rooms.get(room_code)

    async def list_rooms(self) -> List[RoomStore]:
        return sorted(self._rooms.values(), key=lambda r: r.created_at)

    async def delete_room(self, room_code: str) -> bool:
        removed = self._rooms.pop(room_code, None) is not None
        if removed:
            logger.debug("repo: deleted room %s", room_code)
        return removed

    async def update_room_fields(self, room_code: str, **fields: Any) -> None:
        room = self._rooms.get(room_code)
        if room is None:
            return
        for k, v in fields.items():
            setattr(room, k, v)

    async def touch(self, room_code: str, ts: int) -> None:
        await self.update_room_fields(room_code, last_activity=ts)

    async def idle_rooms(self, now: int, ttl_sec: int) -> List[str]:
        """Codes of rooms idle for at least ttl_sec with nobody connected."""
        out: List[str] = []
        for code, room in self._rooms.items():
            if now - room.last_activity < ttl_sec:
                continue
            if any(p.connected for p in room.players):
                continue
            out.append(code)
        return out

    # ----------------------------
    # Players
    # ----------------------------
    async def add_player(self, room_code: str, player: PlayerStore) -> None:
        room = self._rooms.get(room_code)
        if room is None:
            raise KeyError(f"Room {room_code} not found")
        room.players.append(player)

    async def get_player(self, room_code: str, player_id: str) -> Optional[PlayerStore]:
        room = self._rooms.get(room_code)
        if room is None:
            return None
        for p in room.players:
            if p.id == player_id:
                return p
        return None

    async def update_player_fields(self, room_code: str, player_id: str, **fields: Any) -> None:
        p = await self.get_player(room_code, player_id)
        if p is None:
            return
        for k, v in fields.items():
            setattr(p, k, v)
