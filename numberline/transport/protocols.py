# numberline/transport/protocols.py
from __future__ import annotations

from typing import Any, Dict, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


# =========================
# Incoming (Client -> Server)
# =========================

class InBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: str


class InCreateRoom(InBase):
    type: Literal["CREATE_ROOM"] = "CREATE_ROOM"
    name: Optional[str] = None


class InJoinRoom(InBase):
    type: Literal["JOIN_ROOM"] = "JOIN_ROOM"
    code: Optional[str] = None
    name: Optional[str] = None


class InStartGame(InBase):
    type: Literal["START_GAME"] = "START_GAME"
    code: Optional[str] = None


class InUpdateOrder(InBase):
    """
    orderedPlayerIds is kept untyped on purpose: a wrong shape is a rule
    violation the room handler drops, not a protocol error.
    """
    type: Literal["UPDATE_ORDER"] = "UPDATE_ORDER"
    code: Optional[str] = None
    ordered_player_ids: Any = Field(default=None, alias="orderedPlayerIds")


class InRevealNumbers(InBase):
    type: Literal["REVEAL_NUMBERS"] = "REVEAL_NUMBERS"
    code: Optional[str] = None


class InPlayAgain(InBase):
    type: Literal["PLAY_AGAIN"] = "PLAY_AGAIN"
    code: Optional[str] = None


IncomingMessage = Union[
    InCreateRoom,
    InJoinRoom,
    InStartGame,
    InUpdateOrder,
    InRevealNumbers,
    InPlayAgain,
]


# =========================
# Outgoing (Server -> Client)
# =========================

class OutBase(BaseModel):
    type: str


class OutRoomState(OutBase):
    """Per-recipient snapshot: sanitized room + the recipient's own record."""
    type: Literal["ROOM_STATE"] = "ROOM_STATE"
    room: Dict[str, Any]
    you: Dict[str, Any]


class OutError(OutBase):
    type: Literal["ERROR"] = "ERROR"
    code: str
    message: str


class OutRejected(OutBase):
    """Only sent when REJECTION_ACKS is enabled."""
    type: Literal["REJECTED"] = "REJECTED"
    action: str
    code: str
    message: str


OutgoingEvent = Union[
    OutRoomState,
    OutError,
    OutRejected,
]


# =========================
# Parser helpers
# =========================

class UnknownMessage(ValueError):
    pass


_INCOMING_BY_TYPE = {
    "CREATE_ROOM": InCreateRoom,
    "JOIN_ROOM": InJoinRoom,
    "START_GAME": InStartGame,
    "UPDATE_ORDER": InUpdateOrder,
    "REVEAL_NUMBERS": InRevealNumbers,
    "PLAY_AGAIN": InPlayAgain,
}


def parse_incoming(payload: Any) -> IncomingMessage:
    """
    Convert raw dict -> validated message model.
    Raises UnknownMessage for a missing/unknown type and ValidationError
    for a known type with bad fields.
    """
    if not isinstance(payload, dict):
        raise UnknownMessage("Message must be a JSON object")

    t = payload.get("type")
    if not isinstance(t, str):
        raise UnknownMessage("Missing/invalid type")

    cls = _INCOMING_BY_TYPE.get(t)
    if cls is None:
        raise UnknownMessage(f"Unknown message type: {t}")

    return cls.model_validate(payload)
