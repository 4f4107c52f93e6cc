from __future__ import annotations

import os

import pytest

from ftpvfs.core.path_safety import PathSafetyError, PathTooLongError, TraversalRefusedError
from ftpvfs.vfs.resolver import resolve
from ftpvfs.vfs.session import VfsSession, open_session
from ftpvfs.vfs.types import BufferId, StaleResolvedPathError


def make_session(fake_fs, *, cwd: str | None = None, capacity: int = 256) -> VfsSession:
    session = open_session("/root", fs=fake_fs, capacity=capacity)
    if cwd is not None:
        session.chdir(cwd)
    return session


def test_relative_path_is_appended_to_cwd(fake_fs) -> None:
    session = make_session(fake_fs)
    assert session.resolve_for_read_or_write("b").path == "/root/b"

    session.chdir("x")
    assert session.resolve_for_read_or_write("b/c.txt").path == "/root/x/b/c.txt"


def test_dot_dot_inside_path_matches_direct_resolution(fake_fs) -> None:
    session = make_session(fake_fs, cwd="/x")
    via_parent = session.resolve_for_read_or_write("a/../b").path
    direct = session.resolve_for_read_or_write("b").path

    assert via_parent == direct == "/root/x/b"


def test_relative_traversal_clamps_at_cwd_for_regular_operations(fake_fs) -> None:
    session = make_session(fake_fs, cwd="/x/y")
    resolved = session.resolve_for_read_or_write("../../../../etc")
    assert resolved.path == "/root/x/y/etc"


def test_relative_traversal_clamps_at_root_when_not_limited_to_cwd(fake_fs) -> None:
    session = make_session(fake_fs, cwd="/x/y")
    resolved = resolve(session, "../../../../etc", BufferId.PRIMARY, limit_to_cwd=False)
    assert resolved.path == "/root/etc"
    assert resolved.path.startswith(session.root)


@pytest.mark.parametrize("raw_path", ["/b", "/ab", "/", "/b/../a"])
def test_absolute_path_outside_cwd_is_refused(fake_fs, raw_path: str) -> None:
    session = make_session(fake_fs, cwd="/a")
    with pytest.raises(TraversalRefusedError):
        session.resolve_for_read_or_write(raw_path)


@pytest.mark.parametrize(
    ("raw_path", "expected"),
    [
        ("/a", "/root/a"),
        ("/a/", "/root/a/"),
        ("/a/sub/file.txt", "/root/a/sub/file.txt"),
        ("/a/../../etc", "/root/a/etc"),
        ("/a//sub/./f", "/root/a/sub/f"),
    ],
)
def test_absolute_path_inside_cwd_is_reentered(fake_fs, raw_path: str, expected: str) -> None:
    session = make_session(fake_fs, cwd="/a")
    assert session.resolve_for_read_or_write(raw_path).path == expected


def test_absolute_path_from_root_cwd_maps_onto_root(fake_fs) -> None:
    session = make_session(fake_fs)
    assert session.resolve_for_read_or_write("/etc/passwd").path == "/root/etc/passwd"
    assert session.resolve_for_read_or_write("/../etc").path == "/root/etc"


def test_absolute_path_without_limit_may_reach_cwd_ancestors(fake_fs) -> None:
    session = make_session(fake_fs, cwd="/a/sub")
    resolved = resolve(session, "/b", BufferId.PRIMARY, limit_to_cwd=False)
    assert resolved.path == "/root/b"


def test_empty_path_resolves_to_cwd(fake_fs) -> None:
    session = make_session(fake_fs, cwd="/x")
    assert session.resolve_for_read_or_write("").path == "/root/x/"


def test_dot_files_are_not_special(fake_fs) -> None:
    session = make_session(fake_fs)
    assert session.resolve_for_read_or_write(".hidden").path == "/root/.hidden"
    assert session.resolve_for_read_or_write("./.profile").path == "/root/.profile"


def test_path_too_long_fails_before_touching_the_buffer(fake_fs) -> None:
    session = make_session(fake_fs, capacity=32)
    kept = session.resolve_for_read_or_write("keep")
    before = session.buffer(BufferId.PRIMARY).raw()

    with pytest.raises(PathTooLongError):
        session.resolve_for_read_or_write("x" * 26)

    assert session.buffer(BufferId.PRIMARY).raw() == before
    assert kept.path == "/root/keep"


def test_path_filling_the_buffer_exactly_is_accepted(fake_fs) -> None:
    session = make_session(fake_fs, capacity=32)
    assert session.resolve_for_read_or_write("x" * 25).path == "/root/" + "x" * 25


def test_nul_bytes_are_rejected(fake_fs) -> None:
    session = make_session(fake_fs)
    with pytest.raises(PathSafetyError):
        session.resolve_for_read_or_write("file\x00.txt")


def test_later_resolution_invalidates_earlier_view_of_same_buffer(fake_fs) -> None:
    session = make_session(fake_fs)
    first = session.resolve_for_read_or_write("one")
    second = session.resolve_for_read_or_write("two")

    assert first.is_stale
    with pytest.raises(StaleResolvedPathError):
        _ = first.path
    assert second.path == "/root/two"


def test_buffers_resolve_independently(fake_fs) -> None:
    session = make_session(fake_fs, cwd="/a")
    source = session.resolve_for_read_or_write("one", BufferId.PRIMARY)
    target = session.resolve_for_read_or_write("sub/two", BufferId.SECONDARY)

    assert source.path == "/root/a/one"
    assert target.path == "/root/a/sub/two"


def test_resolved_path_is_path_like(fake_fs) -> None:
    session = make_session(fake_fs)
    resolved = session.resolve_for_read_or_write("dir/file")
    assert os.fspath(resolved) == "/root/dir/file"
    assert str(resolved) == "/root/dir/file"


def test_cwd_survives_absolute_path_equal_to_cwd(fake_fs) -> None:
    session = make_session(fake_fs, cwd="/a")
    assert session.resolve_for_read_or_write("/a").path == "/root/a"
    assert session.resolve_for_read_or_write("next").path == "/root/a/next"
    assert session.get_cwd() == "/a"


def test_unlimited_relative_resolution_does_not_leak_into_later_resolves(fake_fs) -> None:
    session = make_session(fake_fs, cwd="/x/y")
    assert resolve(session, "../b", BufferId.PRIMARY, limit_to_cwd=False).path == "/root/x/b"

    assert session.resolve_for_read_or_write("f").path == "/root/x/y/f"
    assert session.resolve_for_read_or_write("/x/y/g").path == "/root/x/y/g"
    assert session.get_cwd() == "/x/y"


def test_unlimited_absolute_resolution_does_not_leak_into_later_resolves(fake_fs) -> None:
    session = make_session(fake_fs, cwd="/x/y")
    assert resolve(session, "/a", BufferId.PRIMARY, limit_to_cwd=False).path == "/root/a"

    assert session.resolve_for_read_or_write("f").path == "/root/x/y/f"
    with pytest.raises(TraversalRefusedError):
        session.resolve_for_read_or_write("/a/f")
    assert session.get_cwd() == "/x/y"


def test_unlimited_resolution_into_secondary_buffer_is_rejected(fake_fs) -> None:
    session = make_session(fake_fs, cwd="/x/y")
    before = session.buffer(BufferId.SECONDARY).raw()

    with pytest.raises(ValueError):
        resolve(session, "/a", BufferId.SECONDARY, limit_to_cwd=False)

    assert session.buffer(BufferId.SECONDARY).raw() == before
    assert session.get_cwd() == "/x/y"
    assert session.resolve_for_read_or_write("f", BufferId.SECONDARY).path == "/root/x/y/f"


def test_chdir_after_unlimited_resolution_starts_from_committed_cwd(fake_fs) -> None:
    session = make_session(fake_fs, cwd="/x")
    resolve(session, "/a/sub", BufferId.PRIMARY, limit_to_cwd=False)

    assert session.chdir("y") == "/x/y"
    assert session.resolve_for_read_or_write("f").path == "/root/x/y/f"
