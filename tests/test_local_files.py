"""Tests for the local filesystem file source."""

import hashlib
import os
from pathlib import Path

import pytest
from conftest import day

from filesync.exceptions import BackendError
from filesync.sources.local import LocalFiles
from filesync.sync import sync_one_way
from filesync.utils import datetime_to_ns


def write(path: Path, text: str, days: int) -> None:
    """Write a file and pin its modified time to ``day(days)``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    timestamp_ns = datetime_to_ns(day(days))
    os.utime(path, ns=(timestamp_ns, timestamp_ns))


class TestLocalFiles:
    """Tests for LocalFiles operations."""

    @pytest.mark.asyncio
    async def test_list_files(self, tmp_path):
        write(tmp_path / "a.txt", "hello", 1)
        write(tmp_path / "folder" / "b.txt", "hi", 2)

        files = await LocalFiles(tmp_path).list_files()

        by_path = {f.path: f for f in files}
        assert set(by_path) == {"a.txt", "folder/b.txt"}
        assert by_path["a.txt"].size == 5
        assert by_path["a.txt"].modified == day(1)
        assert by_path["a.txt"].md5_hash is None
        assert by_path["folder/b.txt"].modified == day(2)

    @pytest.mark.asyncio
    async def test_list_files_with_hashes(self, tmp_path):
        write(tmp_path / "a.txt", "hello", 1)

        files = await LocalFiles(tmp_path, compute_md5_hashes=True).list_files()

        assert files[0].md5_hash == hashlib.md5(b"hello").hexdigest()

    @pytest.mark.asyncio
    async def test_list_missing_root_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            await LocalFiles(tmp_path / "missing").list_files()

    @pytest.mark.asyncio
    async def test_list_missing_root_allowed_when_optional(self, tmp_path):
        files = await LocalFiles(tmp_path / "missing", must_exist=False).list_files()

        assert files == []

    @pytest.mark.asyncio
    async def test_read_write_roundtrip(self, tmp_path):
        fs = LocalFiles(tmp_path / "local")

        with pytest.raises(FileNotFoundError):
            await fs.read_file("tempfile")

        await fs.write_file("nested/dir/tempfile", b"Hello")

        assert await fs.read_file("nested/dir/tempfile") == b"Hello"
        assert (tmp_path / "local" / "nested" / "dir" / "tempfile").read_bytes() == (
            b"Hello"
        )

    @pytest.mark.asyncio
    async def test_set_modified(self, tmp_path):
        fs = LocalFiles(tmp_path)
        write(tmp_path / "a.txt", "a", 1)

        assert await fs.set_modified("a.txt", day(7)) is True
        assert (tmp_path / "a.txt").stat().st_mtime_ns == datetime_to_ns(day(7))
        assert await fs.set_modified("a.txt", None) is False

    @pytest.mark.asyncio
    async def test_path_outside_root_rejected(self, tmp_path):
        fs = LocalFiles(tmp_path / "root")

        with pytest.raises(ValueError, match="escapes"):
            await fs.write_file("../outside.txt", b"x")

    def test_location(self, tmp_path):
        assert str(tmp_path) in LocalFiles(tmp_path).location


class TestLocalToLocalSync:
    """Syncing between two local directories."""

    @pytest.mark.asyncio
    async def test_local_to_local(self, local_dirs):
        local_a, local_b = local_dirs

        # local_b has an outdated file_b
        write(local_b / "file_b.txt", "file_b_old", 0)
        # local_a has up-to-date everything except file_a
        write(local_a / "file_a.txt", "file_a_old", 1)
        write(local_a / "file_b.txt", "file_b_new", 2)
        write(local_a / "file_c.txt", "file_c_new", 3)
        # local_b already has the updated file_a
        write(local_b / "file_a.txt", "file_a_new", 4)

        written = await sync_one_way(LocalFiles(local_a), LocalFiles(local_b))

        assert sorted(written) == ["file_b.txt", "file_c.txt"]
        assert (local_b / "file_a.txt").read_text() == "file_a_new"
        assert (local_b / "file_b.txt").read_text() == "file_b_new"
        assert (local_b / "file_c.txt").read_text() == "file_c_new"
        assert (local_b / "file_c.txt").stat().st_mtime_ns == datetime_to_ns(day(3))

    @pytest.mark.asyncio
    async def test_second_sync_is_noop(self, local_dirs):
        local_a, local_b = local_dirs
        write(local_a / "one.txt", "one", 1)
        write(local_a / "sub" / "two.txt", "two", 2)

        first = await sync_one_way(LocalFiles(local_a), LocalFiles(local_b))
        second = await sync_one_way(LocalFiles(local_a), LocalFiles(local_b))

        assert sorted(first) == ["one.txt", "sub/two.txt"]
        assert second == []

    @pytest.mark.asyncio
    async def test_hashes_skip_identical_files(self, local_dirs):
        local_a, local_b = local_dirs
        write(local_a / "same.txt", "same", 5)
        write(local_b / "same.txt", "same", 1)

        written = await sync_one_way(
            LocalFiles(local_a, compute_md5_hashes=True),
            LocalFiles(local_b, compute_md5_hashes=True),
        )

        assert written == []
        assert (local_b / "same.txt").stat().st_mtime_ns == datetime_to_ns(day(1))

    @pytest.mark.asyncio
    async def test_missing_source_fails_sync(self, tmp_path, local_dirs):
        _, local_b = local_dirs

        with pytest.raises(BackendError) as exc_info:
            await sync_one_way(LocalFiles(tmp_path / "typo"), LocalFiles(local_b))

        assert exc_info.value.operation == "list_files"
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)

    @pytest.mark.asyncio
    async def test_missing_destination_created_on_write(self, tmp_path, local_dirs):
        local_a, _ = local_dirs
        write(local_a / "a.txt", "a", 1)
        destination = tmp_path / "new" / "dest"

        written = await sync_one_way(
            LocalFiles(local_a), LocalFiles(destination, must_exist=False)
        )

        assert written == ["a.txt"]
        assert (destination / "a.txt").read_text() == "a"
