from __future__ import annotations

import argparse
import tempfile
import time
from pathlib import Path

from ftpvfs.vfs.session import open_session
from ftpvfs.vfs.types import BufferId


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Benchmark path resolution and chdir cycles")
    parser.add_argument("--iterations", type=int, default=100000, help="Resolutions per phase")
    parser.add_argument("--depth", type=int, default=8, help="Directory depth to chdir through")
    parser.add_argument("--capacity", type=int, default=256, help="Path buffer capacity in bytes")
    return parser.parse_args()


def build_tree(root: Path, depth: int) -> list[str]:
    names = [f"d{level}" for level in range(depth)]
    current = root
    for name in names:
        current = current / name
        current.mkdir()
    return names


def report(label: str, count: int, elapsed: float) -> None:
    rate = count / elapsed if elapsed > 0 else float("inf")
    print(f"{label:<28} {count:>10} ops  {elapsed:>8.3f}s  {rate:>12.0f} ops/s")


def main() -> None:
    args = parse_args()
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        names = build_tree(root, args.depth)
        session = open_session(root.as_posix(), capacity=args.capacity)

        started = time.perf_counter()
        for idx in range(args.iterations):
            session.resolve_for_read_or_write(f"a/./b/../c{idx % 10}//file.txt")
        report("relative resolve", args.iterations, time.perf_counter() - started)

        started = time.perf_counter()
        for idx in range(args.iterations):
            session.resolve_for_read_or_write(f"/x{idx % 10}/../y", BufferId.SECONDARY)
        report("absolute resolve", args.iterations, time.perf_counter() - started)

        cycles = max(1, args.iterations // (2 * args.depth))
        started = time.perf_counter()
        for _ in range(cycles):
            for name in names:
                session.chdir(name)
            for _ in names:
                session.chdir("..")
        report("chdir down/up", cycles * 2 * args.depth, time.perf_counter() - started)
        print(f"final cwd: {session.get_cwd()}")


if __name__ == "__main__":
    main()
