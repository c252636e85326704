"""File comparison logic for sync operations."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..exceptions import ComparisonError, NoMetadataError
from ..models import FileEntry

logger = logging.getLogger(__name__)


def is_changed_from(candidate: FileEntry, baseline: FileEntry) -> bool:
    """Compare two files to see if ``candidate`` is an update to ``baseline``.

    The rules are applied in order:

    1. If the size and MD5 hash both match, the files are the same.
    2. Failing that, if both files have a modified time, the most recent
       one takes precedence. Equal times mean unchanged.
    3. Failing that, if either the size or MD5 hash differ, the files are
       considered different.

    Args:
        candidate: File that may overwrite ``baseline``
        baseline: File currently at the destination

    Returns:
        True if ``candidate`` should replace ``baseline``

    Raises:
        NoMetadataError: If no size, hash or modified time pair is available
    """
    size_different: Optional[bool] = None
    if candidate.size is not None and baseline.size is not None:
        size_different = candidate.size != baseline.size

    hash_different: Optional[bool] = None
    if candidate.md5_hash is not None and baseline.md5_hash is not None:
        hash_different = candidate.md5_hash != baseline.md5_hash

    # Size and hash unchanged -> file is unchanged
    if size_different is False and hash_different is False:
        return False

    # Next, modified date is the arbiter if present
    if candidate.modified is not None and baseline.modified is not None:
        return candidate.modified > baseline.modified

    if size_different is None and hash_different is None:
        raise NoMetadataError(candidate.path)

    return bool(size_different) or bool(hash_different)


class SyncAction(str, Enum):
    """Actions that can be taken during sync."""

    WRITE = "write"
    """Copy source file to destination"""

    SKIP = "skip"
    """Skip file (no action needed)"""


@dataclass
class SyncDecision:
    """Represents a decision about how to sync a file."""

    action: SyncAction
    """Action to take"""

    reason: str
    """Human-readable reason for this decision"""

    source_file: FileEntry
    """Source file"""

    destination_file: Optional[FileEntry]
    """Destination file (if exists)"""

    relative_path: str
    """Relative path of the file"""


class FileComparator:
    """Compares a source listing against a destination index."""

    def compare_files(
        self,
        source_files: list[FileEntry],
        destination_files: dict[str, FileEntry],
    ) -> list[SyncDecision]:
        """Decide for every source file whether it must be written.

        Every source file is compared before any error is raised so that all
        files lacking metadata are reported at once.

        Args:
            source_files: Source listing, in the order decisions are wanted
            destination_files: Dictionary mapping path to destination FileEntry

        Returns:
            One SyncDecision per source file, in source order

        Raises:
            ComparisonError: If any file could not be compared
        """
        decisions: list[SyncDecision] = []
        errors: list[NoMetadataError] = []

        for source_file in source_files:
            try:
                decision = self._compare_single_file(
                    source_file, destination_files.get(source_file.path)
                )
            except NoMetadataError as e:
                logger.debug(f"Cannot compare {source_file.path}: {e}")
                errors.append(e)
                continue
            decisions.append(decision)

        if errors:
            raise ComparisonError(errors)

        return decisions

    def _compare_single_file(
        self, source_file: FileEntry, destination_file: Optional[FileEntry]
    ) -> SyncDecision:
        """Compare a single file and determine action."""
        path = source_file.path

        if destination_file is None:
            return SyncDecision(
                action=SyncAction.WRITE,
                reason="New file",
                source_file=source_file,
                destination_file=None,
                relative_path=path,
            )

        if is_changed_from(source_file, destination_file):
            return SyncDecision(
                action=SyncAction.WRITE,
                reason="Source file is newer",
                source_file=source_file,
                destination_file=destination_file,
                relative_path=path,
            )

        return SyncDecision(
            action=SyncAction.SKIP,
            reason="Destination file is up to date",
            source_file=source_file,
            destination_file=destination_file,
            relative_path=path,
        )
