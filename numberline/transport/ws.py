# numberline/transport/ws.py
from __future__ import annotations

import ipaddress
import json
import logging
import uuid
from typing import Any, Dict, List, Tuple
from urllib.parse import urlparse

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from numberline.transport.dispatcher import dispatch_disconnect, dispatch_message

logger = logging.getLogger(__name__)

router = APIRouter()


def _is_private_ip(host: str) -> bool:
    """Return True if host is a private IP (192.168.x.x, 10.x.x.x, 172.16-31.x.x)."""
    try:
        ip = ipaddress.ip_address(host)
        return ip.is_private
    except ValueError:
        return False


async def _check_origin_or_close(websocket: WebSocket) -> bool:
    settings = websocket.app.state.settings
    allowed = {o.strip() for o in settings.WS_ALLOWED_ORIGINS.split(",") if o.strip()}

    origin = websocket.headers.get("origin")
    if origin is None or origin in allowed:
        return True
    if settings.WS_ALLOW_LAN_ORIGINS:
        o = urlparse(origin)
        if _is_private_ip(o.hostname or "") and o.port == 5173:
            return True
    logger.info("ws: rejected origin %s", origin)
    await websocket.close(code=1008)
    return False


async def _receive_frame(websocket: WebSocket) -> Any:
    """Next client frame as decoded JSON, None when it is not JSON at all."""
    message = await websocket.receive()
    if message["type"] == "websocket.disconnect":
        raise WebSocketDisconnect(code=message.get("code", 1000))
    data = message.get("text") or message.get("bytes")
    if data is None:
        return None
    try:
        return json.loads(data)
    except ValueError:
        return None


async def deliver(app, to_players: List[Tuple[str, Dict[str, Any]]]) -> None:
    """Route per-player events to live sessions; players without one are skipped."""
    sessions = app.state.sessions
    wsman = app.state.wsman
    for player_id, event in to_players:
        sid = sessions.sid_for(player_id)
        if not wsman.is_live(sid):
            continue
        await wsman.send_to_sid(sid, event)


@router.websocket("/ws")
async def ws_game(websocket: WebSocket):
    if not await _check_origin_or_close(websocket):
        return

    await websocket.accept()

    app = websocket.app
    sid = uuid.uuid4().hex
    app.state.wsman.add(sid, websocket)
    logger.info("ws: %s connected from %s", sid, websocket.client)

    try:
        while True:
            raw = await _receive_frame(websocket)

            to_sender, to_players = await dispatch_message(app=app, sid=sid, raw=raw)

            # unicast
            for e in to_sender:
                await websocket.send_json(e)

            # per-player room state
            await deliver(app, to_players)

    except WebSocketDisconnect:
        logger.info("ws: %s disconnected", sid)

    finally:
        app.state.wsman.remove(sid)
        _, to_players = await dispatch_disconnect(app=app, sid=sid)
        await deliver(app, to_players)
