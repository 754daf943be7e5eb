# numberline/transport/admin.py
from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from numberline.domain.helpers import normalize_room_code

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/rooms")
async def list_rooms(request: Request):
    """
    List all live rooms (debug/admin).
    """
    repo = request.app.state.repo
    sessions = request.app.state.sessions

    rooms = []
    for room in await repo.list_rooms():
        connected = [p for p in room.players if p.connected]
        rooms.append(
            {
                "room_code": room.code,
                "phase": room.phase,
                "round_no": room.round_no,
                "players": len(room.players),
                "connected": len(connected),
                "sessions": len(sessions.members(room.code)),
                "last_activity": room.last_activity,
                "created_at": room.created_at,
            }
        )

    return {"rooms": rooms}


@router.post("/rooms/{room_code}/close")
async def close_room(room_code: str, request: Request):
    """
    Force close a room (debug/admin). Deletes the room and closes its websockets.
    """
    repo = request.app.state.repo
    sessions = request.app.state.sessions
    wsman = request.app.state.wsman

    code = normalize_room_code(room_code)
    if not await repo.delete_room(code):
        raise HTTPException(status_code=404, detail="Room not found")

    sids = sessions.drop_room(code)
    await wsman.close_sids(sids, code=4000)

    return {"ok": True, "room_code": code}
