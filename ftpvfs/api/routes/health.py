from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from ftpvfs.core.config import get_settings
from ftpvfs.sessions.service import SessionRegistry, get_session_registry

router = APIRouter(tags=["health"])


@router.get("/health")
def get_health(registry: SessionRegistry = Depends(get_session_registry)) -> dict[str, object]:
    settings = get_settings()
    return {
        "status": "ok",
        "service": settings.app_name,
        "environment": settings.environment,
        "vfs_root": settings.root_prefix,
        "open_sessions": registry.count(),
        "timestamp": datetime.now(tz=timezone.utc),
    }
