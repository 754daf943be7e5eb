# numberline/domain/lifecycle/handlers.py
from __future__ import annotations

import logging
import uuid
from typing import List, Optional

from numberline.domain.common.errors import ROOM_FULL, ROOM_NOT_FOUND
from numberline.domain.common.events import Result
from numberline.domain.common.validation import clean_name, find_player
from numberline.domain.common.views import Delivery, build_room_states
from numberline.domain.helpers import assign_color_and_icon, generate_room_code, normalize_room_code
from numberline.settings import NUMBER_POOL_SIZE
from numberline.store.models import PlayerStore, RoomStore
from numberline.transport.protocols import InCreateRoom, InJoinRoom, OutError
from numberline.util.timeutil import now_ts

logger = logging.getLogger(__name__)


def _new_player_id() -> str:
    return uuid.uuid4().hex


def _max_players(app) -> int:
    settings = getattr(app.state, "settings", None)
    cap = int(getattr(settings, "MAX_PLAYERS", NUMBER_POOL_SIZE))
    return min(cap, NUMBER_POOL_SIZE)


# -------------------------
# Handlers
# -------------------------

async def handle_create_room(*, app, sid: Optional[str], msg: InCreateRoom) -> Result:
    """
    create_room always succeeds:
    - fresh unique code
    - creator becomes the one and only host
    - ROOM_STATE back to the creator
    """
    repo = app.state.repo
    sessions = app.state.sessions
    ts = now_ts()

    code = generate_room_code(repo.has_code)
    host_id = _new_player_id()
    color, icon = assign_color_and_icon([])

    host = PlayerStore(
        id=host_id,
        name=clean_name(msg.name, "Host"),
        is_host=True,
        number=None,
        connected=True,
        color=color,
        icon=icon,
        joined_at=ts,
    )
    room = RoomStore(
        code=code,
        host_id=host_id,
        players=[host],
        phase="LOBBY",
        current_order=[host_id],
        final_order=None,
        created_at=ts,
        last_activity=ts,
    )
    await repo.create_room(room)
    if sid:
        sessions.bind(sid, code, host_id)

    logger.info("room %s created by %s (%s)", code, host.name, host_id)
    return [], build_room_states(room)


async def handle_join_room(*, app, sid: Optional[str], msg: InJoinRoom) -> Result:
    """
    Join:
    - unknown code -> ERROR to the joiner only, nothing else happens
    - full room -> ERROR to the joiner only
    - otherwise append the player to players and to the end of current_order
    """
    repo = app.state.repo
    sessions = app.state.sessions
    ts = now_ts()

    code = normalize_room_code(msg.code)
    room = await repo.get_room(code) if code else None
    if room is None:
        logger.info("join refused: room %r not found", msg.code)
        return [OutError(code=ROOM_NOT_FOUND, message="Room not found")], []

    # Same connection joining twice keeps its player
    existing = find_player(room, sessions.player_id(sid, code))
    if existing is not None:
        return [], [d for d in build_room_states(room) if d[0] == existing.id]

    if len(room.players) >= _max_players(app):
        logger.info("join refused: room %s is full (%d players)", code, len(room.players))
        return [OutError(code=ROOM_FULL, message="Room is full")], []

    player_id = _new_player_id()
    color, icon = assign_color_and_icon(room.players)
    player = PlayerStore(
        id=player_id,
        name=clean_name(msg.name, "Player"),
        is_host=False,
        number=None,
        connected=True,
        color=color,
        icon=icon,
        joined_at=ts,
    )

    await repo.add_player(code, player)
    await repo.update_room_fields(code, current_order=[*room.current_order, player_id])
    await repo.touch(code, ts)
    if sid:
        sessions.bind(sid, code, player_id)

    logger.info("room %s: %s joined (%s)", code, player.name, player_id)
    return [], build_room_states(room)


async def handle_disconnect(*, app, sid: Optional[str]) -> Result:
    """
    Called by transport when a connection closes.
    Players are kept (marked disconnected); never errors.
    """
    if not sid:
        return [], []

    repo = app.state.repo
    sessions = app.state.sessions
    ts = now_ts()

    deliveries: List[Delivery] = []
    for code, player_id in sessions.release(sid):
        room = await repo.get_room(code)
        if room is None:
            continue
        player = find_player(room, player_id)
        if player is None or not player.connected:
            continue

        await repo.update_player_fields(code, player_id, connected=False)
        await repo.touch(code, ts)
        logger.info("room %s: %s disconnected", code, player.name)
        deliveries.extend(build_room_states(room))

    return [], deliveries
