# numberline/domain/lifecycle/reaper.py
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from numberline.util.timeutil import now_ts

logger = logging.getLogger(__name__)


async def reap_idle_rooms(app, *, ttl_sec: int, now: Optional[int] = None) -> List[str]:
    """
    Delete rooms idle for ttl_sec with no connected player.
    Returns the deleted codes.
    """
    repo = app.state.repo
    sessions = app.state.sessions
    ts = now if now is not None else now_ts()

    reaped: List[str] = []
    for code in await repo.idle_rooms(ts, ttl_sec):
        if await repo.delete_room(code):
            sessions.drop_room(code)
            reaped.append(code)

    if reaped:
        logger.info("reaped %d idle room(s): %s", len(reaped), ", ".join(reaped))
    return reaped


async def run_reaper(app, *, ttl_sec: int, interval_sec: int) -> None:
    """Background loop started by the app; cancelled on shutdown."""
    logger.info("room reaper running: ttl=%ss interval=%ss", ttl_sec, interval_sec)
    while True:
        await asyncio.sleep(interval_sec)
        await reap_idle_rooms(app, ttl_sec=ttl_sec)
