# numberline/store/models.py
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from numberline.domain.common.types import Phase


class _WireModel(BaseModel):
    # snake_case in Python, camelCase on the wire
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PlayerStore(_WireModel):
    """
    One participant of a room.
    The transport session id is deliberately not a field here:
    it lives in the transport's SessionTable only.
    """
    id: str
    name: str
    is_host: bool = False
    number: Optional[int] = None
    connected: bool = True
    color: str
    icon: str
    joined_at: int = 0


class RoomStore(_WireModel):
    code: str
    host_id: str
    players: List[PlayerStore] = Field(default_factory=list)  # join order, never shrinks
    phase: Phase = "LOBBY"
    current_order: List[str] = Field(default_factory=list)  # permutation of player ids
    final_order: Optional[List[str]] = None  # current_order snapshot taken at reveal
    round_no: int = 0
    created_at: int
    last_activity: int
