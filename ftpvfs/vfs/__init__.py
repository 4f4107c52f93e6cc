from ftpvfs.vfs.filesystem import FilesystemDriver, LocalFilesystem
from ftpvfs.vfs.resolver import resolve
from ftpvfs.vfs.session import VfsSession, close_session, open_session
from ftpvfs.vfs.types import (
    BufferId,
    PathBuffer,
    ResolvedPath,
    SessionClosedError,
    StaleResolvedPathError,
    VfsStat,
)
from ftpvfs.vfs.workdir import change_directory

__all__ = [
    "BufferId",
    "FilesystemDriver",
    "LocalFilesystem",
    "PathBuffer",
    "ResolvedPath",
    "SessionClosedError",
    "StaleResolvedPathError",
    "VfsSession",
    "VfsStat",
    "change_directory",
    "close_session",
    "open_session",
    "resolve",
]
