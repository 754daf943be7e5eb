from __future__ import annotations

import random
from typing import List, Optional, Sequence

from numberline.domain.common.errors import CapacityExceeded
from numberline.settings import NUMBER_POOL_SIZE
from numberline.store.models import PlayerStore


def assign_numbers(
    players: Sequence[PlayerStore],
    *,
    rng: Optional[random.Random] = None,
    pool_size: int = NUMBER_POOL_SIZE,
) -> List[int]:
    """
    Give every player a fresh secret number from 1..pool_size, drawn without
    replacement. Previous numbers are overwritten unconditionally.

    Raises CapacityExceeded (before touching anyone) when the pool is too small.
    Returns the drawn numbers in player order.
    """
    if len(players) > pool_size:
        raise CapacityExceeded(len(players), pool_size)

    rng = rng or random.Random()
    pool = list(range(1, pool_size + 1))
    drawn: List[int] = []
    for p in players:
        n = pool.pop(rng.randrange(len(pool)))
        p.number = n
        drawn.append(n)
    return drawn
