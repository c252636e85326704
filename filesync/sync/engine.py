"""Core sync engine for executing one-way sync operations."""

import logging
import time
from collections.abc import Awaitable
from typing import Callable, Optional, TypeVar

from ..exceptions import BackendError
from ..models import FileEntry
from .comparator import FileComparator, SyncAction, SyncDecision
from .protocols import FileSource

logger = logging.getLogger(__name__)

T = TypeVar("T")

ProgressCallback = Callable[[str, int, int], None]
"""Called as ``callback(path, written_count, total)`` after each write."""


class SyncEngine:
    """Core sync engine that copies new and changed files between sources.

    A sync runs in two phases. The diff phase lists both sources and
    compares every file without touching anything. The write phase copies
    each changed file and then tries to make both copies report the same
    modified time. The write phase only starts if every file could be
    compared.

    Examples:
        >>> engine = SyncEngine()
        >>> paths = await engine.sync(LocalFiles("./docs"), S3Files(...))
    """

    def __init__(self, comparator: Optional[FileComparator] = None):
        """Initialize sync engine.

        Args:
            comparator: File comparator to use (default: FileComparator())
        """
        self.comparator = comparator or FileComparator()

    async def plan(
        self, source: FileSource, destination: FileSource
    ) -> list[SyncDecision]:
        """Run the diff phase and return a decision for every source file.

        Args:
            source: Source to copy files from
            destination: Source to copy files to

        Returns:
            List of SyncDecision objects in source listing order

        Raises:
            ComparisonError: If any file could not be compared
            BackendError: If either listing fails
        """
        destination_files = await self._call(
            "list_files", destination.list_files()
        )
        destination_map = self._index_files(destination_files)
        logger.debug(f"Found {len(destination_map)} destination file(s)")

        source_files = await self._call("list_files", source.list_files())
        logger.debug(f"Found {len(source_files)} source file(s)")

        return self.comparator.compare_files(source_files, destination_map)

    async def sync(
        self,
        source: FileSource,
        destination: FileSource,
        dry_run: bool = False,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> list[str]:
        """Sync any new or modified files from ``source`` to ``destination``.

        Files in ``source`` missing from ``destination`` are always written.
        Files present in both are written if the source copy is considered
        more up to date (see :func:`filesync.sync.comparator.is_changed_from`).
        Nothing is ever deleted.

        Writes are not rolled back: if a write fails, files written before it
        stay in place and are listed in ``BackendError.written``.

        Args:
            source: Source to copy files from
            destination: Source to copy files to
            dry_run: If True, only return what would be written
            progress_callback: Optional callback invoked after each write

        Returns:
            Paths written (or that would be written), in source listing order

        Raises:
            ComparisonError: If any file could not be compared; nothing is
                written in that case
            BackendError: If a source operation fails
        """
        decisions = await self.plan(source, destination)
        actionable = [d for d in decisions if d.action == SyncAction.WRITE]

        logger.debug(
            f"Sync plan: {len(actionable)} to write, "
            f"{len(decisions) - len(actionable)} up to date"
        )

        if dry_run:
            return [d.relative_path for d in actionable]

        return await self._execute_decisions(
            actionable, source, destination, progress_callback
        )

    def _index_files(self, files: list[FileEntry]) -> dict[str, FileEntry]:
        """Build a path lookup, letting later duplicates replace earlier ones."""
        index: dict[str, FileEntry] = {}
        for entry in files:
            if entry.path in index:
                logger.warning(f"Duplicate path in destination listing: {entry.path}")
            index[entry.path] = entry
        return index

    async def _execute_decisions(
        self,
        decisions: list[SyncDecision],
        source: FileSource,
        destination: FileSource,
        progress_callback: Optional[ProgressCallback],
    ) -> list[str]:
        """Execute write decisions sequentially, stopping at the first error."""
        written: list[str] = []
        total = len(decisions)

        for decision in decisions:
            await self._execute_single_decision(
                decision, source, destination, written
            )
            written.append(decision.relative_path)
            if progress_callback:
                progress_callback(decision.relative_path, len(written), total)

        return written

    async def _execute_single_decision(
        self,
        decision: SyncDecision,
        source: FileSource,
        destination: FileSource,
        written: list[str],
    ) -> None:
        """Copy one file and reconcile modified times.

        Args:
            decision: Sync decision to execute
            source: Source to read from
            destination: Source to write to
            written: Paths written so far, attached to any error raised
        """
        path = decision.relative_path
        action_start = time.time()
        logger.debug(f"Writing {path} ({decision.reason})...")

        data = await self._call("read_file", source.read_file(path), path, written)
        await self._call(
            "write_file", destination.write_file(path, data), path, written
        )

        source_modified = decision.source_file.modified
        destination_modified = (
            decision.destination_file.modified if decision.destination_file else None
        )

        applied = await self._call(
            "set_modified",
            destination.set_modified(path, source_modified),
            path,
            written,
        )
        if not applied:
            # Destination cannot keep the source time, so move the source
            # to the time the destination had before it was overwritten.
            await self._call(
                "set_modified",
                source.set_modified(path, destination_modified),
                path,
                written,
            )

        action_elapsed = time.time() - action_start
        logger.debug(f"Write of {path} took {action_elapsed:.2f}s")

    async def _call(
        self,
        operation: str,
        awaitable: Awaitable[T],
        path: Optional[str] = None,
        written: Optional[list[str]] = None,
    ) -> T:
        """Await a source operation, wrapping any failure in BackendError."""
        try:
            return await awaitable
        except Exception as e:
            logger.debug(f"{operation} failed for {path or 'listing'}: {e}")
            raise BackendError(operation, e, path=path, written=written) from e


async def sync_one_way(source: FileSource, destination: FileSource) -> list[str]:
    """Sync any new or modified files from one FileSource to another.

    Shorthand for ``SyncEngine().sync(source, destination)``.

    Examples:
        >>> local = LocalFiles("./my_local_files", compute_md5_hashes=True)
        >>> s3 = S3Files("my_bucket", "path/in/bucket", use_etag_as_hash=True)
        >>> await sync_one_way(local, s3)
        ['my_changed_file.txt']
    """
    return await SyncEngine().sync(source, destination)
