from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from ftpvfs.api.routes.health import router as health_router
from ftpvfs.api.routes.sessions import router as sessions_router
from ftpvfs.core.config import get_settings
from ftpvfs.core.logging import configure_logging
from ftpvfs.sessions.service import get_session_registry


@asynccontextmanager
async def lifespan(_app: FastAPI):
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)
    yield
    get_session_registry().close_all()


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(sessions_router, prefix="/api/v1")
    return app
