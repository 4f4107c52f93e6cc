from __future__ import annotations

SEP = 0x2F  # "/"
DOT = 0x2E  # "."


class PathSafetyError(ValueError):
    pass


class PathTooLongError(PathSafetyError):
    pass


class TraversalRefusedError(PathSafetyError):
    pass


class NotADirectoryPathError(PathSafetyError):
    pass


def _segment_kind(buffer: bytearray, seg_start: int, seg_end: int) -> str:
    size = seg_end - seg_start
    if size == 0:
        return "empty"
    if size == 1 and buffer[seg_start] == DOT:
        return "dot"
    if size == 2 and buffer[seg_start] == DOT and buffer[seg_start + 1] == DOT:
        return "dotdot"
    return "name"


def normalize_path(buffer: bytearray, start: int, end: int) -> int:
    """Collapse ``buffer[start:end]`` to its canonical lexical form in place.

    The byte before ``start`` belongs to a protected prefix that ends in a
    separator; it is never read or written. ``..`` segments that would climb
    past ``start`` are dropped. Returns the new end offset.
    """
    if start > end:
        raise ValueError("start must not exceed end")

    trailing_sep = end > start and buffer[end - 1] == SEP
    read = start
    write = start

    while read < end:
        seg_end = buffer.find(b"/", read, end)
        if seg_end == -1:
            seg_end = end
        kind = _segment_kind(buffer, read, seg_end)

        if kind == "name":
            size = seg_end - read
            if write != read:
                buffer[write : write + size] = buffer[read:seg_end]
            write += size
            buffer[write] = SEP
            write += 1
        elif kind == "dotdot" and write > start:
            previous = buffer.rfind(b"/", start, write - 1)
            write = previous + 1 if previous != -1 else start

        read = seg_end + 1

    # the written region always ends in a separator at this point
    if write > start and not trailing_sep:
        write -= 1
    return write


def normalize_text(path: str) -> str:
    scratch = bytearray(path.encode("utf-8") + b"\0")
    end = normalize_path(scratch, 0, len(scratch) - 1)
    return scratch[:end].decode("utf-8")
