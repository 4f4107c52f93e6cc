from __future__ import annotations

import os
import stat as stat_module
from dataclasses import dataclass
from enum import Enum

from ftpvfs.core.path_safety import SEP, PathTooLongError


class StaleResolvedPathError(RuntimeError):
    pass


class SessionClosedError(RuntimeError):
    pass


class BufferId(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"


class PathBuffer:
    """Fixed-capacity byte buffer holding one absolute path.

    One byte of ``capacity`` is reserved as the terminator slot, so the
    longest storable path is ``capacity - 1`` bytes.
    """

    __slots__ = ("capacity", "data", "length", "generation", "cwd_dirty")

    def __init__(self, capacity: int, initial: bytes = b""):
        if capacity < 2:
            raise ValueError("capacity must be at least 2")
        self.capacity = capacity
        self.data = bytearray(capacity)
        self.length = 0
        self.generation = 0
        self.cwd_dirty = False
        if initial:
            self.write(0, initial)

    def _check_bounds(self, end: int) -> None:
        if end + 1 > self.capacity:
            raise PathTooLongError(f"path of {end} bytes exceeds buffer capacity of {self.capacity}")

    def write(self, offset: int, data: bytes) -> int:
        if offset < 0 or offset >= self.capacity:
            raise ValueError(f"write offset {offset} is outside the buffer")
        end = offset + len(data)
        self._check_bounds(end)
        self.data[offset:end] = data
        self.data[end] = 0
        self.length = end
        self.generation += 1
        return end

    def truncate(self, length: int) -> None:
        if length < 0 or length + 1 > self.capacity:
            raise ValueError(f"length {length} is outside the buffer capacity")
        self.length = length
        self.data[length] = 0
        self.generation += 1

    def restore_separator(self, index: int) -> None:
        # a resolution ending right before the cwd separator leaves its terminator there
        self.data[index] = SEP

    def append_separator(self) -> None:
        self._check_bounds(self.length + 1)
        self.data[self.length] = SEP
        self.truncate(self.length + 1)

    def copy_prefix_from(self, other: PathBuffer, length: int) -> None:
        self._check_bounds(length)
        self.data[:length] = other.data[:length]
        self.truncate(length)

    def endswith_separator(self) -> bool:
        return self.length > 0 and self.data[self.length - 1] == SEP

    def raw(self, length: int | None = None) -> bytes:
        end = self.length if length is None else length
        return bytes(self.data[:end])

    def text(self, length: int | None = None) -> str:
        return os.fsdecode(self.raw(length))

    def view(self) -> ResolvedPath:
        return ResolvedPath(buffer=self, length=self.length, generation=self.generation)


@dataclass(frozen=True)
class ResolvedPath:
    buffer: PathBuffer
    length: int
    generation: int

    @property
    def is_stale(self) -> bool:
        return self.buffer.generation != self.generation

    @property
    def path(self) -> str:
        if self.is_stale:
            raise StaleResolvedPathError("resolved path was invalidated by a later resolution into the same buffer")
        return self.buffer.text(self.length)

    def __fspath__(self) -> str:
        return self.path

    def __str__(self) -> str:
        return self.path


@dataclass(slots=True)
class VfsStat:
    mode: int
    size: int
    mtime: float
    is_dir: bool
    is_file: bool

    @classmethod
    def from_stat_result(cls, result: os.stat_result) -> VfsStat:
        return cls(
            mode=result.st_mode,
            size=result.st_size,
            mtime=result.st_mtime,
            is_dir=stat_module.S_ISDIR(result.st_mode),
            is_file=stat_module.S_ISREG(result.st_mode),
        )
