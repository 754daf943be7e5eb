# numberline/domain/round/handlers.py
from __future__ import annotations

import logging
from typing import Optional, Tuple

from numberline.domain.common.errors import INVALID_PHASE, MALFORMED_PAYLOAD, NOT_IN_ROOM, ROOM_NOT_FOUND, UNAUTHORIZED
from numberline.domain.common.events import Result, reject
from numberline.domain.common.fsm import can_reorder
from numberline.domain.common.validation import find_player, is_full_permutation, is_host
from numberline.domain.common.views import build_room_states
from numberline.domain.helpers import assign_numbers, normalize_room_code
from numberline.store.models import PlayerStore, RoomStore
from numberline.transport.protocols import InPlayAgain, InRevealNumbers, InStartGame, InUpdateOrder
from numberline.util.timeutil import now_ts

logger = logging.getLogger(__name__)


async def _room_and_actor(app, sid: Optional[str], raw_code) -> Tuple[Optional[RoomStore], Optional[PlayerStore]]:
    code = normalize_room_code(raw_code)
    room = await app.state.repo.get_room(code) if code else None
    if room is None:
        return None, None
    actor = find_player(room, app.state.sessions.player_id(sid, code))
    return room, actor


async def _host_only(app, sid: Optional[str], raw_code, action: str):
    """Returns (room, None) when the sender is the host, else (None, rejection)."""
    room, actor = await _room_and_actor(app, sid, raw_code)
    if room is None:
        return None, reject(app, action=action, code=ROOM_NOT_FOUND, message="Room not found")
    if actor is None:
        return None, reject(app, action=action, code=NOT_IN_ROOM, message="You are not in this room")
    if not is_host(actor, room):
        return None, reject(app, action=action, code=UNAUTHORIZED, message="Only the host can do that")
    return room, None


async def _start_round(app, room: RoomStore) -> None:
    """New secret numbers, seats back in join order, no final order."""
    repo = app.state.repo

    assign_numbers(room.players)
    await repo.update_room_fields(
        room.code,
        phase="ORDERING",
        final_order=None,
        current_order=[p.id for p in room.players],
        round_no=room.round_no + 1,
    )
    await repo.touch(room.code, now_ts())
    logger.info("room %s: round %d started with %d players", room.code, room.round_no, len(room.players))


async def handle_start_game(*, app, sid: Optional[str], msg: InStartGame) -> Result:
    room, rejected = await _host_only(app, sid, msg.code, "START_GAME")
    if room is None:
        return rejected

    await _start_round(app, room)
    return [], build_room_states(room)


async def handle_update_order(*, app, sid: Optional[str], msg: InUpdateOrder) -> Result:
    """
    Any member may rearrange during ORDERING. The payload must be a full
    permutation of the room's player ids; later updates simply overwrite.
    """
    action = "UPDATE_ORDER"
    room, actor = await _room_and_actor(app, sid, msg.code)
    if room is None:
        return reject(app, action=action, code=ROOM_NOT_FOUND, message="Room not found")
    if actor is None:
        return reject(app, action=action, code=NOT_IN_ROOM, message="You are not in this room")
    if not can_reorder(room.phase):
        return reject(app, action=action, code=INVALID_PHASE, message=f"Cannot reorder during {room.phase}")
    if not is_full_permutation(msg.ordered_player_ids, room):
        return reject(app, action=action, code=MALFORMED_PAYLOAD, message="orderedPlayerIds must list every player once")

    await app.state.repo.update_room_fields(room.code, current_order=list(msg.ordered_player_ids))
    await app.state.repo.touch(room.code, now_ts())
    return [], build_room_states(room)


async def handle_reveal_numbers(*, app, sid: Optional[str], msg: InRevealNumbers) -> Result:
    room, rejected = await _host_only(app, sid, msg.code, "REVEAL_NUMBERS")
    if room is None:
        return rejected

    await app.state.repo.update_room_fields(
        room.code,
        phase="REVEAL",
        final_order=list(room.current_order),
    )
    await app.state.repo.touch(room.code, now_ts())
    logger.info("room %s: numbers revealed", room.code)
    return [], build_room_states(room)


async def handle_play_again(*, app, sid: Optional[str], msg: InPlayAgain) -> Result:
    room, rejected = await _host_only(app, sid, msg.code, "PLAY_AGAIN")
    if room is None:
        return rejected

    await _start_round(app, room)
    return [], build_room_states(room)
