"""CLI interface for filesync."""

import asyncio
import logging
from typing import Any, Callable, Optional

import click
from botocore.exceptions import BotoCoreError, ClientError

from . import __version__
from .cli_progress import run_sync_with_progress
from .config import config
from .exceptions import (
    BackendError,
    ComparisonError,
    S3FilesError,
    SyncError,
)
from .output import OutputFormatter
from .sources import create_source
from .sync import SyncEngine

logger = logging.getLogger(__name__)


def s3_options(func: Callable) -> Callable:
    """Add the S3 connection options shared by several commands."""
    func = click.option(
        "--region",
        default=None,
        help="S3 region (default: FILESYNC_S3_REGION or AWS_DEFAULT_REGION)",
    )(func)
    func = click.option(
        "--endpoint-url",
        default=None,
        help="Custom S3 endpoint URL, e.g. for MinIO (default: FILESYNC_S3_ENDPOINT_URL)",
    )(func)
    func = click.option(
        "--hash/--no-hash",
        "use_hashes",
        default=None,
        help="Compare MD5 hashes: hash local files, trust S3 ETags "
        "(default: FILESYNC_HASH)",
    )(func)
    return func


def _open_source(
    location: str,
    use_hashes: Optional[bool],
    endpoint_url: Optional[str],
    region: Optional[str],
    ignore: tuple[str, ...] = (),
    include_dot_files: bool = False,
    must_exist: bool = True,
) -> Any:
    """Create a file source, filling unset options from the config."""
    if use_hashes is None:
        use_hashes = config.use_hashes

    return create_source(
        location,
        use_hashes=use_hashes,
        ignore_patterns=list(ignore),
        exclude_dot_files=not include_dot_files,
        endpoint_url=endpoint_url or config.s3_endpoint_url,
        access_key=config.access_key,
        secret_key=config.secret_key,
        region=region or config.s3_region,
        must_exist=must_exist,
    )


@click.group()
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option("--json", is_flag=True, help="Output in JSON format")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose/debug logging output",
)
@click.version_option(version=__version__, prog_name="filesync")
@click.pass_context
def main(ctx: Any, quiet: bool, json: bool, verbose: bool) -> None:
    """filesync - One-way sync of new and changed files between storages.

    Locations are local directories or S3 URLs (s3://bucket/prefix).
    """
    # Store settings in context for subcommands to access
    ctx.ensure_object(dict)
    ctx.obj["out"] = OutputFormatter(json_output=json, quiet=quiet)
    ctx.obj["verbose"] = verbose

    # Configure logging based on verbose flag
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("filesync").setLevel(logging.DEBUG)
    else:
        # Set default logging level to WARNING to suppress debug/info messages
        logging.basicConfig(level=logging.WARNING)


@main.command()
@click.argument("source", type=str)
@click.argument("destination", type=str)
@s3_options
@click.option(
    "--dry-run", is_flag=True, help="Show what would be synced without syncing"
)
@click.option(
    "--ignore",
    "-i",
    multiple=True,
    help="Gitignore-style pattern to skip on both sides (repeatable)",
)
@click.option(
    "--include-dot-files",
    is_flag=True,
    help="Sync files and folders starting with a dot",
)
@click.option("--no-progress", is_flag=True, help="Disable progress bar")
@click.pass_context
def sync(
    ctx: Any,
    source: str,
    destination: str,
    use_hashes: Optional[bool],
    endpoint_url: Optional[str],
    region: Optional[str],
    dry_run: bool,
    ignore: tuple[str, ...],
    include_dot_files: bool,
    no_progress: bool,
) -> None:
    """Copy new and changed files from SOURCE to DESTINATION.

    Files are never deleted. A destination file is only overwritten when
    the source copy is newer, or differs in size or hash when no modified
    times are available.

    Examples:
        filesync sync ./docs s3://my-bucket/backup/docs
        filesync sync s3://my-bucket/backup/docs ./restored --hash
        filesync sync ./a ./b --dry-run -i "*.tmp" -i "build/"
    """
    out: OutputFormatter = ctx.obj["out"]

    try:
        from_source = _open_source(
            source, use_hashes, endpoint_url, region, ignore, include_dot_files
        )
        to_source = _open_source(
            destination,
            use_hashes,
            endpoint_url,
            region,
            ignore,
            include_dot_files,
            must_exist=False,
        )

        out.info(f"Syncing: {from_source.location} -> {to_source.location}")
        if dry_run:
            out.info("Dry run: No changes will be made")
        out.print("")

        show_progress = not (no_progress or out.quiet or out.json_output)
        paths = run_sync_with_progress(
            SyncEngine(),
            from_source,
            to_source,
            dry_run=dry_run,
            show_progress=show_progress,
            console=out.console,
        )

    except ComparisonError as e:
        if out.json_output:
            out.output_json({"error": "comparison", "paths": e.paths, "written": []})
        out.error(str(e))
        ctx.exit(1)

    except BackendError as e:
        if out.json_output:
            out.output_json(
                {"error": e.operation, "path": e.path, "written": e.written}
            )
        out.error(str(e))
        if e.written:
            out.warning(f"{len(e.written)} file(s) were written before the failure:")
            for path in e.written:
                out.warning(f"  {path}")
        ctx.exit(1)

    except SyncError as e:
        out.error(str(e))
        ctx.exit(1)

    if out.json_output:
        out.output_json({"written": paths, "dry_run": dry_run})
        return

    for path in paths:
        out.info(f"  ↑ {path}")

    out.print("")
    if dry_run:
        out.success("Dry run complete!")
    else:
        out.success("Sync complete!")

    if paths:
        verb = "Would write" if dry_run else "Written"
        out.info(f"{verb}: {len(paths)} file(s)")
    else:
        out.info("No changes needed - everything is in sync!")


@main.command()
@click.argument("location", type=str)
@s3_options
@click.option(
    "--include-dot-files",
    is_flag=True,
    help="List files and folders starting with a dot",
)
@click.pass_context
def ls(
    ctx: Any,
    location: str,
    use_hashes: Optional[bool],
    endpoint_url: Optional[str],
    region: Optional[str],
    include_dot_files: bool,
) -> None:
    """List files at LOCATION with the metadata used for syncing.

    Examples:
        filesync ls ./docs --hash
        filesync ls s3://my-bucket/backup/docs
    """
    out: OutputFormatter = ctx.obj["out"]

    try:
        file_source = _open_source(
            location,
            use_hashes,
            endpoint_url,
            region,
            include_dot_files=include_dot_files,
        )
        entries = asyncio.run(file_source.list_files())
    except SyncError as e:
        out.error(str(e))
        ctx.exit(1)
    except (OSError, BotoCoreError, ClientError, S3FilesError) as e:
        out.error(f"Could not list {location}: {e}")
        ctx.exit(1)

    if out.json_output:
        out.output_json([entry.to_dict() for entry in entries])
        return

    if not entries:
        out.warning("No files found")
        return

    rows = [
        [
            entry.path,
            out.format_size(entry.size),
            entry.modified.strftime("%Y-%m-%d %H:%M:%S") if entry.modified else "-",
            entry.md5_hash or "-",
        ]
        for entry in entries
    ]
    out.output_table(["Path", "Size", "Modified (UTC)", "MD5"], rows)


if __name__ == "__main__":
    main()
