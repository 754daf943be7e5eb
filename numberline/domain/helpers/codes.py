from __future__ import annotations

import random
from typing import Any, Callable, Optional

# No 0/O or 1/I: codes are read aloud and typed on phones
ROOM_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
ROOM_CODE_LENGTH = 4
ROOM_CODE_SPACE = len(ROOM_CODE_ALPHABET) ** ROOM_CODE_LENGTH


def normalize_room_code(raw: Any) -> str:
    """Canonical form used for every lookup: trimmed and upper-cased."""
    if not isinstance(raw, str):
        return ""
    return raw.strip().upper()


def generate_room_code(
    exists: Callable[[str], bool],
    *,
    rng: Optional[random.Random] = None,
    max_attempts: int = ROOM_CODE_SPACE,
) -> str:
    """
    Draw codes until one is not taken according to `exists`.
    Raises RuntimeError once max_attempts draws all collided.
    """
    rng = rng or random.SystemRandom()
    for _ in range(max_attempts):
        code = "".join(rng.choice(ROOM_CODE_ALPHABET) for _ in range(ROOM_CODE_LENGTH))
        if not exists(code):
            return code
    raise RuntimeError("No free room code available")
