from ftpvfs.sessions.service import (
    SessionLimitError,
    SessionNotFoundError,
    SessionRegistry,
    get_session_registry,
)

__all__ = [
    "SessionLimitError",
    "SessionNotFoundError",
    "SessionRegistry",
    "get_session_registry",
]
