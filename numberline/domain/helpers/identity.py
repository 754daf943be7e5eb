from __future__ import annotations

import random
from typing import Iterable, Optional, Tuple

from numberline.store.models import PlayerStore

PLAYER_COLORS = [
    "#ff6b6b",
    "#f7b731",
    "#4cd964",
    "#5ac8fa",
    "#007aff",
    "#af52de",
    "#ff9f0a",
    "#ff2d55",
]

PLAYER_ICONS = ["♠️", "♥️", "♦️", "♣️", "⭐️", "🎵", "🍀", "🔥"]


def assign_color_and_icon(
    players: Iterable[PlayerStore],
    *,
    rng: Optional[random.Random] = None,
) -> Tuple[str, str]:
    """
    Pick a (color, icon) pair for a newcomer.

    Candidates are enumerated as (colors[i % C], icons[i % I]) for i in 0..C*I-1
    and the first pair nobody in the room wears wins. Once every candidate is
    taken a random pair is returned, duplicates allowed.
    """
    used = {(p.color, p.icon) for p in players}

    n_colors = len(PLAYER_COLORS)
    n_icons = len(PLAYER_ICONS)
    for i in range(n_colors * n_icons):
        pair = (PLAYER_COLORS[i % n_colors], PLAYER_ICONS[i % n_icons])
        if pair not in used:
            return pair

    rng = rng or random.Random()
    return rng.choice(PLAYER_COLORS), rng.choice(PLAYER_ICONS)
