"""Directory scanning utilities for sync operations."""

import logging
from pathlib import Path
from typing import Optional

from ..models import FileEntry
from ..utils import calculate_md5, datetime_from_ns
from .ignore import IGNORE_FILE_NAMES, IgnorePatterns

logger = logging.getLogger(__name__)


class DirectoryScanner:
    """Scans directories and builds file lists.

    Supports ``.gitignore`` and ``.ignore`` files for gitignore-style
    pattern matching. When scanning a directory, ignore files in that
    directory or its subdirectories are loaded and applied hierarchically.
    Dot files and dot folders are skipped unless ``exclude_dot_files`` is
    turned off.

    Examples:
        >>> scanner = DirectoryScanner()
        >>> files = scanner.scan(Path("/sync/folder"))

        >>> # With extra patterns and MD5 hashes
        >>> scanner = DirectoryScanner(ignore_patterns=["*.tmp"], compute_md5_hashes=True)
        >>> files = scanner.scan(Path("/sync/folder"))
    """

    def __init__(
        self,
        ignore_patterns: Optional[list[str]] = None,
        exclude_dot_files: bool = True,
        use_ignore_files: bool = True,
        compute_md5_hashes: bool = False,
    ):
        """Initialize directory scanner.

        Args:
            ignore_patterns: List of glob patterns to ignore (e.g., ["*.log", "temp/"])
            exclude_dot_files: Whether to exclude files/folders starting with dot
            use_ignore_files: Whether to load ignore files from directories
            compute_md5_hashes: Whether to hash each file's contents
        """
        self.ignore_patterns = ignore_patterns or []
        self.exclude_dot_files = exclude_dot_files
        self.use_ignore_files = use_ignore_files
        self.compute_md5_hashes = compute_md5_hashes

    def scan(self, directory: Path) -> list[FileEntry]:
        """Recursively scan a local directory.

        Args:
            directory: Root directory to scan

        Returns:
            List of FileEntry objects with paths relative to ``directory``

        Raises:
            FileNotFoundError: If ``directory`` does not exist
            PermissionError: If a directory in the tree cannot be read
        """
        if not directory.is_dir():
            raise FileNotFoundError(f"Directory not found: {directory}")

        ignore = IgnorePatterns(self.ignore_patterns)
        files: list[FileEntry] = []
        self._scan_directory(directory, directory, ignore, files)
        return files

    def should_ignore(
        self,
        path: Path,
        base_path: Path,
        ignore: IgnorePatterns,
        is_dir: bool = False,
    ) -> bool:
        """Check if a path should be ignored.

        Args:
            path: Path to check
            base_path: Base path for relative path calculation
            ignore: Rules loaded so far
            is_dir: Whether the path is a directory

        Returns:
            True if path should be ignored
        """
        if self.exclude_dot_files and path.name.startswith("."):
            return True

        if self.use_ignore_files and path.name in IGNORE_FILE_NAMES:
            return True

        relative_path = path.relative_to(base_path).as_posix()
        if ignore.is_ignored(relative_path, is_dir=is_dir):
            logger.debug(f"Ignoring (from rules): {relative_path}")
            return True

        return False

    def _scan_directory(
        self,
        directory: Path,
        base_path: Path,
        ignore: IgnorePatterns,
        files: list[FileEntry],
    ) -> None:
        if self.use_ignore_files:
            base = ""
            if directory != base_path:
                base = directory.relative_to(base_path).as_posix()
            ignore.load_from_directory(directory, base)

        try:
            items = sorted(directory.iterdir())
        except PermissionError:
            logger.warning(f"Cannot read directory: {directory}")
            raise

        for item in items:
            if item.is_symlink():
                continue

            is_dir = item.is_dir()
            if self.should_ignore(item, base_path, ignore, is_dir=is_dir):
                continue

            if is_dir:
                self._scan_directory(item, base_path, ignore, files)
            elif item.is_file():
                files.append(self._make_entry(item, base_path))

    def _make_entry(self, file_path: Path, base_path: Path) -> FileEntry:
        """Create a FileEntry from a path."""
        stat = file_path.stat()
        md5_hash = calculate_md5(file_path) if self.compute_md5_hashes else None

        return FileEntry(
            # Use as_posix() to ensure forward slashes on all platforms
            path=file_path.relative_to(base_path).as_posix(),
            modified=datetime_from_ns(stat.st_mtime_ns),
            size=stat.st_size,
            md5_hash=md5_hash,
        )
