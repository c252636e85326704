"""Data models for filesync."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class FileEntry:
    """A file at a path with whatever metadata its source can report.

    A ``None`` field means the source cannot report that property, not that
    the file lacks it. A source reports the same set of fields for every
    entry of one listing.
    """

    path: str
    """Root-relative path using forward slashes"""

    modified: Optional[datetime] = None
    """Last modification time (timezone-aware, UTC)"""

    size: Optional[int] = None
    """File size in bytes"""

    md5_hash: Optional[str] = None
    """MD5 digest of the contents as 32 lowercase hex characters"""

    def is_changed_from(self, other: "FileEntry") -> bool:
        """Check whether this file is an update to ``other``.

        See :func:`filesync.sync.comparator.is_changed_from`.
        """
        from .sync.comparator import is_changed_from

        return is_changed_from(self, other)

    def to_dict(self) -> dict:
        """Convert to a JSON-friendly dictionary."""
        return {
            "path": self.path,
            "modified": self.modified.isoformat() if self.modified else None,
            "size": self.size,
            "md5_hash": self.md5_hash,
        }
