"""CLI progress display for sync operations.

This module provides a Rich-based progress display driven by the sync
engine's progress callback.
"""

import asyncio
from typing import Optional

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

from .sync.engine import SyncEngine
from .sync.protocols import FileSource


class SyncProgressDisplay:
    """Rich-based progress display for sync operations.

    Shows how many of the changed files have been written so far and the
    path of the last file written.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        """Initialize the progress display."""
        self._console = console
        self._progress: Optional[Progress] = None
        self._write_task: Optional[TaskID] = None

    def handle_progress(self, path: str, written: int, total: int) -> None:
        """Progress callback for :meth:`SyncEngine.sync`.

        Args:
            path: Path that was just written
            written: Number of files written so far
            total: Number of files to write
        """
        if self._progress is None or self._write_task is None:
            return

        self._progress.update(
            self._write_task,
            description="Syncing files...",
            total=total,
            completed=written,
            current_file=path,
        )

    def __enter__(self) -> "SyncProgressDisplay":
        """Enter context manager - start progress display."""
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TextColumn("[cyan]{task.fields[current_file]}"),
            TimeElapsedColumn(),
            console=self._console,
            transient=True,
            refresh_per_second=4,
        )
        self._progress.__enter__()

        self._write_task = self._progress.add_task(
            "Comparing files...",
            total=None,
            current_file="",
        )

        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit context manager - stop progress display."""
        if self._progress is not None:
            self._progress.__exit__(exc_type, exc_val, exc_tb)
            self._progress = None
            self._write_task = None


def run_sync_with_progress(
    engine: SyncEngine,
    source: FileSource,
    destination: FileSource,
    dry_run: bool,
    show_progress: bool = True,
    console: Optional[Console] = None,
) -> list[str]:
    """Run a sync to completion, with a Rich progress display.

    Args:
        engine: SyncEngine instance
        source: Source to copy files from
        destination: Source to copy files to
        dry_run: If True, only report what would be written
        show_progress: If False, run without any progress display
        console: Console to render the progress bar on

    Returns:
        Paths written (or that would be written)
    """
    # For dry-run, don't show progress bar (just text output)
    if dry_run or not show_progress:
        return asyncio.run(engine.sync(source, destination, dry_run=dry_run))

    with SyncProgressDisplay(console=console) as display:
        return asyncio.run(
            engine.sync(
                source,
                destination,
                progress_callback=display.handle_progress,
            )
        )
