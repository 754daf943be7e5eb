# numberline/transport/sessions.py
from __future__ import annotations

from typing import Dict, List, Optional, Set, Tuple

Binding = Tuple[str, str]  # (room_code, player_id)


class SessionTable:
    """
    Session id <-> player lookup owned by the transport.

    - sid -> {room_code: player_id}   resolves "who sent this action"
    - player_id -> sid                routes per-player payloads
    - room_code -> {sid}              room membership for fan-out

    Session ids never leave this table; domain code only sees player ids.
    """

    def __init__(self) -> None:
        self._by_sid: Dict[str, Dict[str, str]] = {}
        self._sid_by_player: Dict[str, str] = {}
        self._members: Dict[str, Set[str]] = {}

    def bind(self, sid: str, room_code: str, player_id: str) -> None:
        self._by_sid.setdefault(sid, {})[room_code] = player_id
        self._sid_by_player[player_id] = sid
        self._members.setdefault(room_code, set()).add(sid)

    def player_id(self, sid: Optional[str], room_code: str) -> Optional[str]:
        if not sid:
            return None
        return self._by_sid.get(sid, {}).get(room_code)

    def sid_for(self, player_id: str) -> Optional[str]:
        return self._sid_by_player.get(player_id)

    def bindings(self, sid: str) -> List[Binding]:
        return list(self._by_sid.get(sid, {}).items())

    def members(self, room_code: str) -> Set[str]:
        return set(self._members.get(room_code, set()))

    def release(self, sid: str) -> List[Binding]:
        """Forget a closed session; returns what it was bound to."""
        rooms = self._by_sid.pop(sid, {})
        for room_code, player_id in rooms.items():
            if self._sid_by_player.get(player_id) == sid:
                self._sid_by_player.pop(player_id, None)
            members = self._members.get(room_code)
            if members is not None:
                members.discard(sid)
                if not members:
                    self._members.pop(room_code, None)
        return list(rooms.items())

    def drop_room(self, room_code: str) -> Set[str]:
        """Unbind every session from a room; returns the sids that were members."""
        sids = self._members.pop(room_code, set())
        for sid in sids:
            player_id = self._by_sid.get(sid, {}).pop(room_code, None)
            if player_id is not None and self._sid_by_player.get(player_id) == sid:
                self._sid_by_player.pop(player_id, None)
            if sid in self._by_sid and not self._by_sid[sid]:
                self._by_sid.pop(sid, None)
        return sids
