"""Protocol a storage backend implements to take part in a sync.

Any object providing these coroutines can be passed to the sync engine;
there is no base class to inherit from.
"""

from datetime import datetime
from typing import Optional, Protocol, runtime_checkable

from ..models import FileEntry


@runtime_checkable
class FileSource(Protocol):
    """A location files can be listed, read from and written to."""

    async def list_files(self) -> list[FileEntry]:
        """Recursively list all files in the source.

        Paths are relative to the source root. Any size, hash or modified
        time reported for an entry must come from the same read of the file.
        """
        ...

    async def read_file(self, path: str) -> bytes:
        """Read a single file and return its contents.

        Raises a backend-specific error if the file does not exist.
        """
        ...

    async def write_file(self, path: str, data: bytes) -> None:
        """Write a single file, creating parent folders as needed."""
        ...

    async def set_modified(self, path: str, modified: Optional[datetime]) -> bool:
        """Set the modified time, if provided, for a single file.

        Returns:
            True if the time was set. False if ``modified`` is None or the
            source cannot store modified times.
        """
        ...
