from __future__ import annotations

import stat as stat_module
from typing import TYPE_CHECKING

from ftpvfs.core.path_safety import NotADirectoryPathError, PathTooLongError
from ftpvfs.vfs.resolver import resolve
from ftpvfs.vfs.types import BufferId

if TYPE_CHECKING:
    from ftpvfs.vfs.session import VfsSession


def _rollback(session: VfsSession) -> None:
    committed = session.buffer(BufferId.SECONDARY)
    committed.restore_separator(session.cwd_len - 1)
    working = session.buffer(BufferId.PRIMARY)
    working.copy_prefix_from(committed, session.cwd_len)
    working.cwd_dirty = False


def _commit(session: VfsSession, length: int) -> None:
    working = session.buffer(BufferId.PRIMARY)
    session.buffer(BufferId.SECONDARY).copy_prefix_from(working, length)
    working.cwd_dirty = False
    session.cwd_len = length


def change_directory(session: VfsSession, raw_path: str) -> str:
    """Move the session's cwd to ``raw_path`` and return the new virtual cwd.

    The candidate is built in the primary buffer while the secondary buffer
    keeps the committed cwd. On any failure the primary buffer is restored
    from it, so ``cwd_len`` bytes of both buffers always hold a valid cwd.
    """
    working = session.buffer(BufferId.PRIMARY)
    resolved = resolve(session, raw_path, BufferId.PRIMARY, limit_to_cwd=False)
    length = resolved.length
    log_extra = {"session_id": session.session_id, "raw_path": raw_path}

    if not working.endswith_separator():
        if length + 2 > working.capacity:
            _rollback(session)
            session.logger.error("path too long in chdir", extra={**log_extra, "event": "path_too_long"})
            raise PathTooLongError(f"path too long: {raw_path!r}")
        working.append_separator()
        length += 1

    if length == session.root_len:
        _commit(session, length)
        return session.get_cwd()

    target = working.text(length - 1)
    try:
        is_dir = stat_module.S_ISDIR(session.fs.stat(target).st_mode)
    except OSError as exc:
        _rollback(session)
        session.logger.warning(
            "client tried to chdir to a directory that doesn't exist",
            extra={**log_extra, "event": "chdir_failed", "resolved_path": target, "error_type": type(exc).__name__},
        )
        raise NotADirectoryPathError(f"not a directory: {raw_path!r}") from exc

    if not is_dir:
        _rollback(session)
        session.logger.warning(
            "client tried to chdir to something that is not a directory",
            extra={**log_extra, "event": "chdir_failed", "resolved_path": target},
        )
        raise NotADirectoryPathError(f"not a directory: {raw_path!r}")

    _commit(session, length)
    session.logger.info("changed directory", extra={**log_extra, "event": "chdir", "cwd": session.get_cwd()})
    return session.get_cwd()
