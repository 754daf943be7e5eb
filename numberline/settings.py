# numberline/settings.py
from __future__ import annotations

from pydantic import BaseModel
import os

# Secret numbers are drawn from 1..NUMBER_POOL_SIZE, so a room can never hold more players.
NUMBER_POOL_SIZE = 100


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "y", "on")


class Settings(BaseModel):
    APP_NAME: str = "numberline-server"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 4000

    # Dev
    LOG_LEVEL: str = "INFO"

    # Idle room reclamation (0 disables)
    ROOM_TTL_SEC: int = 1800
    REAPER_INTERVAL_SEC: int = 60

    # Game
    MAX_PLAYERS: int = NUMBER_POOL_SIZE
    # Send REJECTED to the sender instead of silently dropping an illegal action
    REJECTION_ACKS: bool = False

    # WebSocket origin policy (comma-separated)
    WS_ALLOWED_ORIGINS: str = "http://localhost:5173,http://127.0.0.1:5173,null"
    # Dev helper: allow any private LAN IP on port 5173
    WS_ALLOW_LAN_ORIGINS: bool = True


def get_settings() -> Settings:
    max_players = int(os.getenv("MAX_PLAYERS", str(NUMBER_POOL_SIZE)))
    return Settings(
        APP_NAME=os.getenv("APP_NAME", "numberline-server"),
        HOST=os.getenv("HOST", "0.0.0.0"),
        PORT=int(os.getenv("PORT", "4000")),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
        ROOM_TTL_SEC=int(os.getenv("ROOM_TTL_SEC", "1800")),
        REAPER_INTERVAL_SEC=int(os.getenv("REAPER_INTERVAL_SEC", "60")),
        MAX_PLAYERS=max(1, min(max_players, NUMBER_POOL_SIZE)),
        REJECTION_ACKS=_env_bool("REJECTION_ACKS", "false"),
        WS_ALLOWED_ORIGINS=os.getenv(
            "WS_ALLOWED_ORIGINS",
            "http://localhost:5173,http://127.0.0.1:5173,null",
        ),
        WS_ALLOW_LAN_ORIGINS=_env_bool("WS_ALLOW_LAN_ORIGINS", "true"),
    )
