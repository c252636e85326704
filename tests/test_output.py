"""Tests for console output and the sync progress display."""

import json
from io import StringIO
from unittest.mock import AsyncMock, Mock

from rich.console import Console

from filesync.cli_progress import SyncProgressDisplay, run_sync_with_progress
from filesync.output import OutputFormatter


def make_formatter(**kwargs):
    out_buffer = StringIO()
    err_buffer = StringIO()
    formatter = OutputFormatter(
        console=Console(file=out_buffer, width=120),
        err_console=Console(file=err_buffer, width=120),
        **kwargs,
    )
    return formatter, out_buffer, err_buffer


class TestOutputFormatter:
    """Tests for OutputFormatter."""

    def test_info_and_warning_streams(self):
        out, stdout, stderr = make_formatter()

        out.info("hello")
        out.warning("careful")

        assert "hello" in stdout.getvalue()
        assert "careful" in stderr.getvalue()

    def test_quiet_suppresses_all_but_errors(self):
        out, stdout, stderr = make_formatter(quiet=True)

        out.info("hello")
        out.success("done")
        out.warning("careful")
        out.error("broken")

        assert stdout.getvalue() == ""
        assert "careful" not in stderr.getvalue()
        assert "Error: broken" in stderr.getvalue()

    def test_json_mode_only_prints_json(self):
        out, stdout, _ = make_formatter(json_output=True)

        out.info("hello")
        out.output_json({"written": ["a.txt"]})

        assert json.loads(stdout.getvalue()) == {"written": ["a.txt"]}

    def test_output_table(self):
        out, stdout, _ = make_formatter()

        out.output_table(["Path", "Size"], [["a.txt", "5 B"]], title="Files")

        text = stdout.getvalue()
        assert "Files" in text
        assert "a.txt" in text
        assert "5 B" in text

    def test_format_size_unknown(self):
        out, _, _ = make_formatter()

        assert out.format_size(None) == "-"
        assert out.format_size(2048) == "2.0 KB"


class TestSyncProgressDisplay:
    """Tests for the progress display and runner."""

    def test_callback_outside_context_is_ignored(self):
        display = SyncProgressDisplay(console=Console(file=StringIO()))

        display.handle_progress("a.txt", 1, 1)

    def test_callback_updates_task(self):
        console = Console(file=StringIO())

        with SyncProgressDisplay(console=console) as display:
            display.handle_progress("a.txt", 1, 2)
            task = display._progress.tasks[0]

            assert task.completed == 1
            assert task.total == 2
            assert task.fields["current_file"] == "a.txt"

    def test_run_without_progress(self):
        engine = Mock()
        engine.sync = AsyncMock(return_value=["a.txt"])

        result = run_sync_with_progress(
            engine, "source", "destination", dry_run=True, show_progress=True
        )

        assert result == ["a.txt"]
        engine.sync.assert_awaited_once_with("source", "destination", dry_run=True)

    def test_run_with_progress_passes_callback(self):
        engine = Mock()
        engine.sync = AsyncMock(return_value=[])

        run_sync_with_progress(
            engine,
            "source",
            "destination",
            dry_run=False,
            console=Console(file=StringIO()),
        )

        kwargs = engine.sync.await_args.kwargs
        assert callable(kwargs["progress_callback"])
