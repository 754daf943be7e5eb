"""
Per-recipient projections of a room.

Numbers are hidden from everybody until REVEAL; a recipient always sees their
own number through `you`. Nothing transport-related is stored on the models,
so nothing transport-related can end up in a payload.
"""
# numberline/domain/common/views.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

from numberline.domain.common.types import Outcome
from numberline.store.models import PlayerStore, RoomStore
from numberline.transport.protocols import OutRoomState

Delivery = Tuple[str, OutRoomState]  # (player_id, event)


def _number(player: PlayerStore) -> int:
    return player.number or 0


def classify_order(final_order: Sequence[str], players: Sequence[PlayerStore]) -> Outcome:
    """
    EXACT: final_order is the room sorted by number (stable, so ties keep
    join order and unassigned numbers count as 0).
    CLOSE: numbers along final_order never decrease, but it is not that order.
    INCORRECT: some higher number was placed before a lower one.
    """
    correct = [p.id for p in sorted(players, key=_number)]
    if list(final_order) == correct:
        return "EXACT"
    numbers = _final_numbers(final_order, players)
    if all(a <= b for a, b in zip(numbers, numbers[1:])):
        return "CLOSE"
    return "INCORRECT"


def _final_numbers(final_order: Sequence[str], players: Sequence[PlayerStore]) -> List[int]:
    by_id = {p.id: p for p in players}
    return [_number(by_id[pid]) for pid in final_order if pid in by_id]


def reveal_result(room: RoomStore) -> Optional[Dict[str, Any]]:
    if room.phase != "REVEAL" or room.final_order is None:
        return None
    return {
        "outcome": classify_order(room.final_order, room.players),
        "numbers": _final_numbers(room.final_order, room.players),
    }


def player_view(player: PlayerStore, *, show_number: bool = True) -> Dict[str, Any]:
    data = player.model_dump(by_alias=True, exclude={"joined_at"})
    if not show_number:
        data["number"] = None
    return data


def room_view(room: RoomStore) -> Dict[str, Any]:
    reveal = room.phase == "REVEAL"
    view: Dict[str, Any] = {
        "code": room.code,
        "hostId": room.host_id,
        "players": [player_view(p, show_number=reveal) for p in room.players],
        "phase": room.phase,
        "currentOrder": list(room.current_order),
        "finalOrder": list(room.final_order) if room.final_order is not None else None,
        "roundNo": room.round_no,
        "createdAt": room.created_at,
    }
    result = reveal_result(room)
    if result is not None:
        view["result"] = result
    return view


def build_room_states(room: RoomStore) -> List[Delivery]:
    """One ROOM_STATE per player, built in full before anything is sent."""
    shared = room_view(room)
    out: List[Delivery] = []
    for p in room.players:
        out.append((p.id, OutRoomState(room=shared, you=player_view(p))))
    return out
