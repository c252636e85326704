"""Shared fixtures and test doubles for filesync tests."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from filesync.models import FileEntry
from filesync.utils import md5_of_bytes

BASE_DATE = datetime(2000, 1, 1, tzinfo=timezone.utc)


def day(n: int) -> datetime:
    """Return BASE_DATE plus ``n`` days."""
    return BASE_DATE + timedelta(days=n)


class Clock:
    """Shared counter handing out one new day per write."""

    def __init__(self) -> None:
        self.ticks = 0

    def tick(self) -> datetime:
        now = day(self.ticks)
        self.ticks += 1
        return now


class StorageTestError(Exception):
    """Raised by MemorySource for configured failures."""


class MemorySource:
    """In-memory FileSource recording every call made to it.

    A written file gets the next time from ``clock`` (or no modified time
    without a clock) and an MD5 hash when ``use_hashes`` is set. Writing
    moves a file to the end of the listing.
    """

    def __init__(
        self,
        clock: Optional[Clock] = None,
        use_hashes: bool = False,
        supports_modified: bool = True,
    ) -> None:
        self.clock = clock
        self.use_hashes = use_hashes
        self.supports_modified = supports_modified
        self.files: dict[str, tuple[FileEntry, bytes]] = {}
        self.calls: list[tuple[str, str]] = []
        self.fail_on: dict[str, set[str]] = {}

    def _maybe_fail(self, operation: str, path: str) -> None:
        self.calls.append((operation, path))
        if path in self.fail_on.get(operation, set()):
            raise StorageTestError(f"{operation} failed for {path}")

    def put(self, path: str, data: bytes) -> None:
        """Synchronously add a file, as write_file would."""
        modified = self.clock.tick() if self.clock else None
        md5_hash = md5_of_bytes(data) if self.use_hashes else None
        self.files.pop(path, None)
        self.files[path] = (
            FileEntry(path=path, modified=modified, size=len(data), md5_hash=md5_hash),
            data,
        )

    def entry(self, path: str) -> FileEntry:
        return self.files[path][0]

    def data(self, path: str) -> bytes:
        return self.files[path][1]

    @property
    def writes(self) -> list[str]:
        return [path for operation, path in self.calls if operation == "write_file"]

    async def list_files(self) -> list[FileEntry]:
        self._maybe_fail("list_files", "")
        return [entry for entry, _ in self.files.values()]

    async def read_file(self, path: str) -> bytes:
        self._maybe_fail("read_file", path)
        if path not in self.files:
            raise FileNotFoundError(path)
        return self.files[path][1]

    async def write_file(self, path: str, data: bytes) -> None:
        self._maybe_fail("write_file", path)
        self.put(path, data)

    async def set_modified(self, path: str, modified: Optional[datetime]) -> bool:
        self._maybe_fail("set_modified", path)
        if not self.supports_modified or modified is None or path not in self.files:
            return False
        entry, data = self.files[path]
        self.files[path] = (
            FileEntry(
                path=entry.path,
                modified=modified,
                size=entry.size,
                md5_hash=entry.md5_hash,
            ),
            data,
        )
        return True


class ListingSource(MemorySource):
    """MemorySource whose listing is a fixed list of entries."""

    def __init__(self, entries: list[FileEntry], **kwargs) -> None:
        super().__init__(**kwargs)
        self.entries = entries

    async def list_files(self) -> list[FileEntry]:
        self._maybe_fail("list_files", "")
        return list(self.entries)


@pytest.fixture
def clock():
    """Provide a shared clock for two sources."""
    return Clock()


@pytest.fixture
def local_dirs(tmp_path):
    """Create empty source and destination directories."""
    source = tmp_path / "local_a"
    destination = tmp_path / "local_b"
    source.mkdir()
    destination.mkdir()
    return source, destination
