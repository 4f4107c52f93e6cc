from __future__ import annotations

import os
from typing import IO, Any, Iterator, Protocol


class FilesystemDriver(Protocol):
    """Operations the VFS issues against the real filesystem.

    Every path handed to a driver is already resolved, normalized and
    absolute. Failures are reported by raising ``OSError`` subclasses.
    """

    def stat(self, path: str) -> os.stat_result: ...

    def mkdir(self, path: str, mode: int) -> None: ...

    def rmdir(self, path: str) -> None: ...

    def unlink(self, path: str) -> None: ...

    def rename(self, from_path: str, to_path: str) -> None: ...

    def open(self, path: str, mode: str) -> IO[Any]: ...

    def opendir(self, path: str) -> Iterator[os.DirEntry[str]]: ...


class LocalFilesystem:
    def stat(self, path: str) -> os.stat_result:
        return os.stat(path)

    def mkdir(self, path: str, mode: int) -> None:
        os.mkdir(path, mode)

    def rmdir(self, path: str) -> None:
        os.rmdir(path)

    def unlink(self, path: str) -> None:
        os.unlink(path)

    def rename(self, from_path: str, to_path: str) -> None:
        os.rename(from_path, to_path)

    def open(self, path: str, mode: str) -> IO[Any]:
        return open(path, mode)

    def opendir(self, path: str) -> Iterator[os.DirEntry[str]]:
        return os.scandir(path)
