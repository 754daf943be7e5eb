# numberline/transport/dispatcher.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from numberline.transport.protocols import (
    parse_incoming,
    OutRejected,
    OutgoingEvent,
    InCreateRoom,
    InJoinRoom,
    InStartGame,
    InUpdateOrder,
    InRevealNumbers,
    InPlayAgain,
)
from numberline.domain.common.errors import MALFORMED_PAYLOAD
from numberline.domain.common.events import Result, rejection_acks_enabled
from numberline.domain.lifecycle.handlers import (
    handle_create_room,
    handle_join_room,
    handle_disconnect,
)
from numberline.domain.round.handlers import (
    handle_start_game,
    handle_update_order,
    handle_reveal_numbers,
    handle_play_again,
)

logger = logging.getLogger(__name__)

DispatchResult = Tuple[List[Dict[str, Any]], List[Tuple[str, Dict[str, Any]]]]
# (to_sender_events, [(player_id, event)]), each event is a JSON dict

_HANDLERS = {
    InCreateRoom: handle_create_room,
    InJoinRoom: handle_join_room,
    InStartGame: handle_start_game,
    InUpdateOrder: handle_update_order,
    InRevealNumbers: handle_reveal_numbers,
    InPlayAgain: handle_play_again,
}


async def dispatch_message(
    *,
    app,
    sid: Optional[str],
    raw: Any,
) -> DispatchResult:
    """
    Transport layer calls this.
    - Parses + validates raw JSON
    - Routes to the correct room handler
    - Returns (to_sender, to_players) as JSON dicts

    NOTE: This file contains NO game rules.
    """
    try:
        msg = parse_incoming(raw)
    except (ValidationError, ValueError) as e:
        logger.debug("dropped malformed message from %s: %s", sid, e)
        if rejection_acks_enabled(app):
            action = raw.get("type") if isinstance(raw, dict) else None
            err = OutRejected(action=str(action or ""), code=MALFORMED_PAYLOAD, message=str(e))
            return [err.model_dump()], []
        return [], []

    handler = _HANDLERS[type(msg)]
    to_sender, to_players = await handler(app=app, sid=sid, msg=msg)
    return _dump_result((to_sender, to_players))


async def dispatch_disconnect(*, app, sid: Optional[str]) -> DispatchResult:
    return _dump_result(await handle_disconnect(app=app, sid=sid))


def _dump_result(result: Result) -> DispatchResult:
    to_sender, to_players = result
    return _dump(to_sender), [(pid, e.model_dump()) for pid, e in to_players]


def _dump(events: List[OutgoingEvent]) -> List[Dict[str, Any]]:
    """
    Convert pydantic events -> JSON dicts.
    """
    return [e.model_dump() for e in events]
