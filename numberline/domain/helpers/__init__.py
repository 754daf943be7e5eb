from __future__ import annotations

from .codes import generate_room_code, normalize_room_code
from .identity import assign_color_and_icon
from .numbers import assign_numbers

__all__ = [
    "generate_room_code",
    "normalize_room_code",
    "assign_color_and_icon",
    "assign_numbers",
]
