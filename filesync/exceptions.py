"""Exceptions raised by filesync."""

from typing import Optional


class SyncError(Exception):
    """Base exception for all filesync errors."""


class ConfigError(SyncError):
    """Raised when a storage location or configuration value is invalid."""


class NoMetadataError(SyncError):
    """Raised when there is not enough metadata to tell if a file changed."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Not enough metadata to tell if file `{path}` has changed")


class ComparisonError(SyncError):
    """Raised once per sync when one or more files could not be compared.

    No changes have been written when this is raised. All offending files
    are collected in ``errors`` so they can be reported together.
    """

    def __init__(self, errors: list[NoMetadataError]):
        self.errors = list(errors)
        lines = "\n".join(str(error) for error in self.errors)
        super().__init__(
            f"Errors occurred while comparing files. "
            f"No changes have been written:\n{lines}"
        )

    @property
    def paths(self) -> list[str]:
        """Paths of every file that could not be compared."""
        return [error.path for error in self.errors]


class BackendError(SyncError):
    """Wraps an exception raised by a file source operation.

    The original exception is available as ``__cause__``. ``written`` lists
    the paths that were already committed to the destination before the
    failure, so callers can tell a clean failure from a partial sync.
    """

    def __init__(
        self,
        operation: str,
        error: BaseException,
        path: Optional[str] = None,
        written: Optional[list[str]] = None,
    ):
        self.operation = operation
        self.error = error
        self.path = path
        self.written = list(written or [])
        target = f" `{path}`" if path is not None else ""
        super().__init__(f"{operation}{target} failed: {error}")


class S3FilesError(Exception):
    """Raised when an S3 listing returns an object that cannot be mapped."""
