"""Utility functions for filesync."""

import hashlib
import re
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

# =============================================================================
# Constants
# =============================================================================

# Read size when hashing files (1 MB)
HASH_CHUNK_SIZE: int = 1024 * 1024

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_MD5_HEX_RE = re.compile(r"^[0-9a-fA-F]{32}$")


# =============================================================================
# Timestamp utilities
# =============================================================================


def datetime_from_ns(timestamp_ns: int) -> datetime:
    """Convert a Unix timestamp in nanoseconds to an aware UTC datetime.

    Precision is truncated to microseconds, the resolution of ``datetime``.

    Examples:
        >>> datetime_from_ns(946684800_000_000_000)
        datetime.datetime(2000, 1, 1, 0, 0, tzinfo=datetime.timezone.utc)
    """
    return EPOCH + timedelta(microseconds=timestamp_ns // 1000)


def datetime_to_ns(value: datetime) -> int:
    """Convert a datetime to a Unix timestamp in nanoseconds.

    Naive datetimes are assumed to be UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    delta = value - EPOCH
    microseconds = (delta.days * 86400 + delta.seconds) * 1_000_000 + delta.microseconds
    return microseconds * 1000


def to_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize a datetime to aware UTC, passing None through."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# =============================================================================
# Hash utilities
# =============================================================================


def calculate_md5(file_path: Path, chunk_size: int = HASH_CHUNK_SIZE) -> str:
    """Calculate the MD5 digest of a file.

    Args:
        file_path: File to hash
        chunk_size: Number of bytes read at a time

    Returns:
        Lowercase hex digest
    """
    digest = hashlib.md5()
    with open(file_path, "rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            digest.update(chunk)
    return digest.hexdigest()


def md5_of_bytes(data: bytes) -> str:
    """Return the lowercase hex MD5 digest of ``data``."""
    return hashlib.md5(data).hexdigest()


def parse_etag_as_md5(etag: Optional[str]) -> Optional[str]:
    """Interpret an S3 ETag as an MD5 digest.

    Only single-part uploads have an ETag equal to the MD5 of the content.
    Multipart ETags (``"<hex>-<parts>"``) and anything else that is not
    exactly 32 hex characters yield None.

    Examples:
        >>> parse_etag_as_md5('"5d41402abc4b2a76b9719d911017c592"')
        '5d41402abc4b2a76b9719d911017c592'
        >>> parse_etag_as_md5('"5d41402abc4b2a76b9719d911017c592-2"') is None
        True
    """
    if not etag:
        return None
    value = etag.strip('"')
    if not _MD5_HEX_RE.match(value):
        return None
    return value.lower()


# =============================================================================
# Size formatting utilities
# =============================================================================


def format_size(size_bytes: Optional[int]) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes, or None if unknown

    Returns:
        Formatted size string (e.g., "1.5 MB", "256 B", "-")
    """
    if size_bytes is None:
        return "-"
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / 1024 / 1024:.1f} MB"
    else:
        return f"{size_bytes / 1024 / 1024 / 1024:.1f} GB"
