from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Iterator
from uuid import uuid4

from ftpvfs.core.config import Settings, get_settings
from ftpvfs.vfs.filesystem import FilesystemDriver
from ftpvfs.vfs.session import VfsSession, open_session

_logger = logging.getLogger(__name__)


class SessionNotFoundError(RuntimeError):
    pass


class SessionLimitError(RuntimeError):
    pass


@dataclass(slots=True)
class _SessionEntry:
    session: VfsSession
    lock: threading.Lock = field(default_factory=threading.Lock)


class SessionRegistry:
    def __init__(self, settings: Settings, fs: FilesystemDriver | None = None):
        self._settings = settings
        self._fs = fs
        self._sessions: dict[str, _SessionEntry] = {}
        self._lock = threading.Lock()

    def open(self) -> tuple[str, VfsSession]:
        session_id = uuid4().hex
        with self._lock:
            if len(self._sessions) >= self._settings.max_sessions:
                raise SessionLimitError(f"Session limit of {self._settings.max_sessions} reached")
            session = open_session(
                self._settings.root_prefix,
                fs=self._fs,
                capacity=self._settings.path_capacity,
                default_dir_mode=self._settings.default_dir_mode,
                session_id=session_id,
            )
            self._sessions[session_id] = _SessionEntry(session)
            count = len(self._sessions)

        _logger.info(
            "session opened",
            extra={"session_id": session_id, "event": "session_opened", "session_count": count},
        )
        return session_id, session

    def _entry(self, session_id: str) -> _SessionEntry:
        with self._lock:
            entry = self._sessions.get(session_id)
        if entry is None:
            raise SessionNotFoundError(f"Session not found: {session_id}")
        return entry

    def get(self, session_id: str) -> VfsSession:
        return self._entry(session_id).session

    @contextmanager
    def lease(self, session_id: str) -> Iterator[VfsSession]:
        """Hold the session exclusively; sessions are not reentrant."""
        entry = self._entry(session_id)
        with entry.lock:
            if entry.session.closed:
                raise SessionNotFoundError(f"Session not found: {session_id}")
            yield entry.session

    def close(self, session_id: str) -> None:
        with self._lock:
            entry = self._sessions.pop(session_id, None)
            count = len(self._sessions)
        if entry is None:
            raise SessionNotFoundError(f"Session not found: {session_id}")
        with entry.lock:
            entry.session.close()
        _logger.info(
            "session closed",
            extra={"session_id": session_id, "event": "session_released", "session_count": count},
        )

    def count(self) -> int:
        with self._lock:
            return len(self._sessions)

    def close_all(self) -> int:
        with self._lock:
            entries = list(self._sessions.values())
            self._sessions.clear()
        for entry in entries:
            with entry.lock:
                entry.session.close()
        return len(entries)


@lru_cache(maxsize=1)
def get_session_registry() -> SessionRegistry:
    return SessionRegistry(get_settings())
