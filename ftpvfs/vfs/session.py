from __future__ import annotations

import logging
import os
from typing import IO, Any, Iterator

from ftpvfs.core.path_safety import PathTooLongError
from ftpvfs.vfs.filesystem import FilesystemDriver, LocalFilesystem
from ftpvfs.vfs.resolver import resolve
from ftpvfs.vfs.types import BufferId, PathBuffer, ResolvedPath, SessionClosedError, VfsStat
from ftpvfs.vfs.workdir import change_directory

DEFAULT_PATH_CAPACITY = 256
DEFAULT_DIR_MODE = 0o777

_logger = logging.getLogger(__name__)


class VfsSession:
    """Per-connection view of the virtual filesystem.

    The root prefix and both path buffers are fixed for the session's
    lifetime. The first ``cwd_len`` bytes of each buffer hold the current
    working directory, always ending in a separator; ``root_len`` of those
    are the root and are never rewritten. Not safe for concurrent use.
    """

    def __init__(
        self,
        root: str,
        *,
        fs: FilesystemDriver | None = None,
        capacity: int = DEFAULT_PATH_CAPACITY,
        default_dir_mode: int = DEFAULT_DIR_MODE,
        logger: logging.Logger | logging.LoggerAdapter | None = None,
        session_id: str | None = None,
    ):
        if not root.startswith("/"):
            raise ValueError("root must be an absolute path")
        prefix = root if root.endswith("/") else root + "/"
        encoded = os.fsencode(prefix)
        if len(encoded) + 1 >= capacity:
            raise PathTooLongError(f"root {prefix!r} does not fit in a buffer of {capacity} bytes")

        self.root = prefix
        self.root_len = len(encoded)
        self.cwd_len = self.root_len
        self.fs: FilesystemDriver = fs if fs is not None else LocalFilesystem()
        self.default_dir_mode = default_dir_mode
        self.logger = logger if logger is not None else _logger
        self.session_id = session_id or "-"
        self.closed = False
        self._buffers = {
            BufferId.PRIMARY: PathBuffer(capacity, encoded),
            BufferId.SECONDARY: PathBuffer(capacity, encoded),
        }

    def __enter__(self) -> VfsSession:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def capacity(self) -> int:
        return self._buffers[BufferId.PRIMARY].capacity

    def buffer(self, buffer_id: BufferId) -> PathBuffer:
        return self._buffers[buffer_id]

    def ensure_open(self) -> None:
        if self.closed:
            raise SessionClosedError("session is closed")

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self.logger.debug("session closed", extra={"session_id": self.session_id, "event": "session_closed"})

    def resolve_for_read_or_write(self, path: str, buffer_id: BufferId = BufferId.PRIMARY) -> ResolvedPath:
        return resolve(self, path, buffer_id, limit_to_cwd=True)

    def chdir(self, path: str) -> str:
        self.ensure_open()
        return change_directory(self, path)

    def get_cwd(self) -> str:
        self.ensure_open()
        if self.cwd_len == self.root_len:
            return "/"
        committed = self._buffers[BufferId.SECONDARY]
        return os.fsdecode(bytes(committed.data[self.root_len - 1 : self.cwd_len - 1]))

    def rename(self, from_path: str, to_path: str) -> None:
        source = self.resolve_for_read_or_write(from_path, BufferId.PRIMARY)
        target = self.resolve_for_read_or_write(to_path, BufferId.SECONDARY)
        self.logger.info(
            "rename",
            extra={"session_id": self.session_id, "event": "rename", "from_path": source.path, "to_path": target.path},
        )
        self.fs.rename(source.path, target.path)

    def mkdir(self, path: str, mode: int | None = None) -> str:
        target = self.resolve_for_read_or_write(path).path
        self.fs.mkdir(target, self.default_dir_mode if mode is None else mode)
        return target

    def rmdir(self, path: str) -> None:
        self.fs.rmdir(self.resolve_for_read_or_write(path).path)

    def remove(self, path: str) -> None:
        self.fs.unlink(self.resolve_for_read_or_write(path).path)

    def stat(self, path: str) -> VfsStat:
        return VfsStat.from_stat_result(self.fs.stat(self.resolve_for_read_or_write(path).path))

    def opendir(self, path: str = "") -> Iterator[os.DirEntry[str]]:
        return self.fs.opendir(self.resolve_for_read_or_write(path).path)

    def open(self, path: str, mode: str = "rb") -> IO[Any]:
        return self.fs.open(self.resolve_for_read_or_write(path).path, mode)


def open_session(
    root: str,
    *,
    fs: FilesystemDriver | None = None,
    capacity: int | None = None,
    default_dir_mode: int | None = None,
    logger: logging.Logger | logging.LoggerAdapter | None = None,
    session_id: str | None = None,
) -> VfsSession:
    return VfsSession(
        root,
        fs=fs,
        capacity=DEFAULT_PATH_CAPACITY if capacity is None else capacity,
        default_dir_mode=DEFAULT_DIR_MODE if default_dir_mode is None else default_dir_mode,
        logger=logger,
        session_id=session_id,
    )


def close_session(session: VfsSession) -> None:
    session.close()
