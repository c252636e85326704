"""FileSource for local files on disk."""

import asyncio
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from ..models import FileEntry
from ..sync.scanner import DirectoryScanner
from ..utils import datetime_to_ns

logger = logging.getLogger(__name__)


class LocalFiles:
    """A FileSource for a directory tree on the local filesystem.

    Blocking filesystem calls run in a worker thread so the coroutines
    never block the event loop.
    """

    def __init__(
        self,
        root: Union[Path, str],
        compute_md5_hashes: bool = False,
        ignore_patterns: Optional[list[str]] = None,
        exclude_dot_files: bool = True,
        use_ignore_files: bool = True,
        must_exist: bool = True,
    ) -> None:
        """Initialize local file source.

        Args:
            root: Directory to sync. Created on first write if missing.
            compute_md5_hashes: Whether files have their MD5 hashes
                computed when being listed
            ignore_patterns: Extra gitignore-style patterns to skip
            exclude_dot_files: Whether to skip files/folders starting with dot
            use_ignore_files: Whether to honor .gitignore/.ignore files
            must_exist: Whether listing a missing root is an error. Turn off
                for a destination that is created on first write.
        """
        self.root = Path(root)
        self.compute_md5_hashes = compute_md5_hashes
        self.must_exist = must_exist
        self.scanner = DirectoryScanner(
            ignore_patterns=ignore_patterns,
            exclude_dot_files=exclude_dot_files,
            use_ignore_files=use_ignore_files,
            compute_md5_hashes=compute_md5_hashes,
        )

    @property
    def location(self) -> str:
        """Return a human-readable description of the root."""
        return f"Local filesystem: {self.root}"

    def _full_path(self, path: str) -> Path:
        """Resolve a relative path below the root.

        Raises:
            ValueError: If the path would escape the root
        """
        relative = Path(path)
        if relative.is_absolute() or ".." in relative.parts:
            raise ValueError(f"Path escapes sync root: {path}")
        return self.root / relative

    def list_files_sync(self) -> list[FileEntry]:
        if not self.must_exist and not self.root.exists():
            logger.debug(f"Root does not exist yet, nothing listed: {self.root}")
            return []
        return self.scanner.scan(self.root)

    def read_file_sync(self, path: str) -> bytes:
        return self._full_path(path).read_bytes()

    def write_file_sync(self, path: str, data: bytes) -> None:
        file_path = self._full_path(path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_bytes(data)

    def set_modified_sync(self, path: str, modified: Optional[datetime]) -> bool:
        if modified is None:
            return False

        file_path = self._full_path(path)
        timestamp_ns = datetime_to_ns(modified)
        os.utime(file_path, ns=(timestamp_ns, timestamp_ns))
        logger.debug(f"Set modified time of {file_path} to {modified.isoformat()}")
        return True

    async def list_files(self) -> list[FileEntry]:
        return await asyncio.to_thread(self.list_files_sync)

    async def read_file(self, path: str) -> bytes:
        return await asyncio.to_thread(self.read_file_sync, path)

    async def write_file(self, path: str, data: bytes) -> None:
        await asyncio.to_thread(self.write_file_sync, path, data)

    async def set_modified(self, path: str, modified: Optional[datetime]) -> bool:
        return await asyncio.to_thread(self.set_modified_sync, path, modified)
