# numberline/domain/common/errors.py
from __future__ import annotations

from typing import Literal

# Codes carried by ERROR / REJECTED events
ErrorCode = Literal[
    "ROOM_NOT_FOUND",
    "ROOM_FULL",
    "UNAUTHORIZED",
    "INVALID_PHASE",
    "MALFORMED_PAYLOAD",
    "NOT_IN_ROOM",
]

ROOM_NOT_FOUND: ErrorCode = "ROOM_NOT_FOUND"
ROOM_FULL: ErrorCode = "ROOM_FULL"
UNAUTHORIZED: ErrorCode = "UNAUTHORIZED"
INVALID_PHASE: ErrorCode = "INVALID_PHASE"
MALFORMED_PAYLOAD: ErrorCode = "MALFORMED_PAYLOAD"
NOT_IN_ROOM: ErrorCode = "NOT_IN_ROOM"


class CapacityExceeded(ValueError):
    """More players than there are secret numbers to hand out."""

    def __init__(self, players: int, pool_size: int) -> None:
        super().__init__(f"Cannot assign {players} distinct numbers from a pool of {pool_size}")
        self.players = players
        self.pool_size = pool_size
