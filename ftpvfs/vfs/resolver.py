from __future__ import annotations

import os
from typing import TYPE_CHECKING

from ftpvfs.core.path_safety import (
    SEP,
    PathSafetyError,
    PathTooLongError,
    TraversalRefusedError,
    normalize_path,
)
from ftpvfs.vfs.types import BufferId, ResolvedPath

if TYPE_CHECKING:
    from ftpvfs.vfs.session import VfsSession


def _encode(raw_path: str) -> bytes:
    if "\x00" in raw_path:
        raise PathSafetyError("NUL bytes are not allowed in paths")
    return os.fsencode(raw_path)


def _points_into_cwd(buffer_data: bytearray, raw: bytes, root_len: int, cwd_len: int) -> bool:
    scope = cwd_len - root_len
    if len(raw) < scope:
        return False
    if raw[:scope] != buffer_data[root_len - 1 : cwd_len - 1]:
        return False
    return len(raw) == scope or raw[scope] == SEP


def resolve(
    session: VfsSession,
    raw_path: str,
    buffer_id: BufferId = BufferId.PRIMARY,
    *,
    limit_to_cwd: bool = True,
) -> ResolvedPath:
    """Resolve ``raw_path`` into one of the session's path buffers.

    Relative paths are appended to the cwd. Absolute paths are taken
    relative to the virtual root; with ``limit_to_cwd`` they must point at
    or below the cwd, otherwise they may reach any ancestor of the cwd up
    to the root. Resolution overwrites the selected buffer, invalidating any
    earlier ``ResolvedPath`` into it.
    """
    session.ensure_open()
    if not limit_to_cwd and buffer_id is not BufferId.PRIMARY:
        raise ValueError("unlimited resolution is only supported on the primary buffer")
    raw = _encode(raw_path)
    buffer = session.buffer(buffer_id)
    root_len = session.root_len
    cwd_len = session.cwd_len
    log_extra = {"session_id": session.session_id, "raw_path": raw_path, "limit_to_cwd": limit_to_cwd}

    if cwd_len + len(raw) + 1 > buffer.capacity:
        session.logger.error(
            "path too long",
            extra={**log_extra, "event": "path_too_long", "capacity": buffer.capacity},
        )
        raise PathTooLongError(f"path too long: {raw_path!r}")

    if buffer.cwd_dirty:
        committed = session.buffer(BufferId.SECONDARY)
        committed.restore_separator(cwd_len - 1)
        buffer.copy_prefix_from(committed, cwd_len)
        buffer.cwd_dirty = False
    buffer.restore_separator(cwd_len - 1)

    if raw.startswith(b"/"):
        if limit_to_cwd:
            if not _points_into_cwd(buffer.data, raw, root_len, cwd_len):
                session.logger.warning(
                    "refusing absolute path which doesn't point into the current cwd",
                    extra={**log_extra, "event": "traversal_refused"},
                )
                raise TraversalRefusedError(f"absolute path outside the current directory: {raw_path!r}")
            end = buffer.write(cwd_len - 1, raw[cwd_len - root_len :])
            normalize_from = cwd_len
        else:
            end = buffer.write(root_len - 1, raw)
            normalize_from = root_len
    else:
        end = buffer.write(cwd_len, raw)
        normalize_from = cwd_len if limit_to_cwd else root_len

    if end > normalize_from:
        buffer.truncate(normalize_path(buffer.data, normalize_from, end))
    if not limit_to_cwd:
        # everything past root_len may have been rewritten
        buffer.cwd_dirty = True

    resolved = buffer.view()
    session.logger.debug(
        "resolved path",
        extra={**log_extra, "event": "path_resolved", "resolved_path": resolved.path},
    )
    return resolved
