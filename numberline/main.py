# numberline/main.py
from __future__ import annotations

import asyncio
import contextlib
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from numberline.domain.lifecycle.reaper import run_reaper
from numberline.settings import Settings, get_settings
from numberline.store.memory_repo import MemoryRepo
from numberline.transport.admin import router as admin_router
from numberline.transport.sessions import SessionTable
from numberline.transport.ws import router as ws_router
from numberline.transport.ws_manager import WSManager

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    app = FastAPI(title=settings.APP_NAME)
    allowed_origins = [o.strip() for o in settings.WS_ALLOWED_ORIGINS.split(",") if o.strip()]
    if "null" not in allowed_origins:
        allowed_origins.append("null")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Available before startup so routes work under any test harness
    app.state.settings = settings
    app.state.repo = MemoryRepo()
    app.state.sessions = SessionTable()
    app.state.wsman = WSManager()
    app.state.reaper = None

    @app.on_event("startup")
    async def _startup() -> None:
        if settings.ROOM_TTL_SEC > 0:
            app.state.reaper = asyncio.create_task(
                run_reaper(app, ttl_sec=settings.ROOM_TTL_SEC, interval_sec=settings.REAPER_INTERVAL_SEC)
            )
        logger.info("%s ready", settings.APP_NAME)

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        task = app.state.reaper
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
            app.state.reaper = None

    @app.get("/health")
    async def health():
        return {"ok": True, "rooms": len(app.state.repo)}

    app.include_router(ws_router)
    app.include_router(admin_router)
    return app


app = create_app()


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "numberline.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
