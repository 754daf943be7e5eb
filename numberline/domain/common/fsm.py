# numberline/domain/common/fsm.py
from __future__ import annotations

from numberline.domain.common.types import Phase


def can_reorder(current: Phase) -> bool:
    """Seats only move while players are arranging themselves."""
    return current == "ORDERING"
