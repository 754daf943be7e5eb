# numberline/domain/common/types.py
from __future__ import annotations

from typing import Literal

Phase = Literal["LOBBY", "ORDERING", "REVEAL"]
Outcome = Literal["EXACT", "CLOSE", "INCORRECT"]
