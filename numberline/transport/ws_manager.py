# numberline/transport/ws_manager.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from fastapi import WebSocket

logger = logging.getLogger(__name__)


@dataclass
class Conn:
    sid: str
    ws: WebSocket


class WSManager:
    """
    In-memory connection registry.
    - sid -> websocket
    Transport-only: no domain rules. Room membership lives in SessionTable.
    """
    def __init__(self) -> None:
        self._conns: Dict[str, Conn] = {}

    def __len__(self) -> int:
        return len(self._conns)

    def add(self, sid: str, ws: WebSocket) -> None:
        self._conns[sid] = Conn(sid=sid, ws=ws)

    def remove(self, sid: str) -> None:
        self._conns.pop(sid, None)

    def is_live(self, sid: Optional[str]) -> bool:
        return bool(sid) and sid in self._conns

    async def send_to_sid(self, sid: Optional[str], event: dict) -> bool:
        """
        Fire-and-forget. A failed send marks the connection dead; the read loop
        in ws.py does the disconnect bookkeeping.
        """
        conn = self._conns.get(sid) if sid else None
        if conn is None:
            return False
        try:
            await conn.ws.send_json(event)
            return True
        except Exception as e:
            logger.warning("send to %s failed: %s", sid, e)
            self.remove(sid)
            return False

    async def close_sids(self, sids: Iterable[str], code: int = 4000) -> None:
        for sid in list(sids):
            conn = self._conns.get(sid)
            if conn is None:
                continue
            try:
                await conn.ws.close(code=code)
            except Exception as e:
                logger.debug("close %s failed: %s", sid, e)
            self.remove(sid)
