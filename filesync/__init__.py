"""filesync - One-way sync of new and changed files between storages."""

__version__ = "0.1.2"

from .exceptions import (  # noqa: E402
    BackendError,
    ComparisonError,
    ConfigError,
    NoMetadataError,
    S3FilesError,
    SyncError,
)
from .models import FileEntry  # noqa: E402
from .sync import FileSource, SyncEngine, is_changed_from, sync_one_way  # noqa: E402

__all__ = [
    "__version__",
    "FileEntry",
    "FileSource",
    "SyncEngine",
    "is_changed_from",
    "sync_one_way",
    "SyncError",
    "ConfigError",
    "NoMetadataError",
    "ComparisonError",
    "BackendError",
    "S3FilesError",
]
