from __future__ import annotations

import time


def now_ts() -> int:
    """Current time as whole epoch seconds."""
    return int(time.time())
