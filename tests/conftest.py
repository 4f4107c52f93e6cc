from __future__ import annotations

import errno
import io
import os
import stat
from typing import Any

import pytest


class FakeFilesystem:
    def __init__(self, directories: set[str] | None = None, files: set[str] | None = None):
        self.directories = set(directories or ())
        self.files = set(files or ())
        self.calls: list[tuple[Any, ...]] = []
        self.stat_error: OSError | None = None

    def _stat_result(self, mode: int) -> os.stat_result:
        return os.stat_result((mode, 0, 0, 1, 0, 0, 0, 0, 0, 0))

    def stat(self, path: str) -> os.stat_result:
        self.calls.append(("stat", path))
        if self.stat_error is not None:
            raise self.stat_error
        if path in self.directories:
            return self._stat_result(stat.S_IFDIR | 0o755)
        if path in self.files:
            return self._stat_result(stat.S_IFREG | 0o644)
        raise FileNotFoundError(errno.ENOENT, "No such file or directory", path)

    def mkdir(self, path: str, mode: int) -> None:
        self.calls.append(("mkdir", path, mode))
        self.directories.add(path)

    def rmdir(self, path: str) -> None:
        self.calls.append(("rmdir", path))
        self.directories.discard(path)

    def unlink(self, path: str) -> None:
        self.calls.append(("unlink", path))
        self.files.discard(path)

    def rename(self, from_path: str, to_path: str) -> None:
        self.calls.append(("rename", from_path, to_path))

    def open(self, path: str, mode: str) -> io.BytesIO:
        self.calls.append(("open", path, mode))
        return io.BytesIO()

    def opendir(self, path: str) -> list[Any]:
        self.calls.append(("opendir", path))
        return []


@pytest.fixture
def fake_fs() -> FakeFilesystem:
    return FakeFilesystem(
        directories={"/root/x", "/root/x/y", "/root/a", "/root/a/sub", "/root/b"},
        files={"/root/x/file.txt"},
    )
