"""File sources: the storage backends filesync can sync between."""

from typing import Optional, Union
from urllib.parse import urlparse

from ..exceptions import ConfigError
from .local import LocalFiles
from .s3 import S3Files

S3_SCHEME = "s3"


def create_source(
    location: str,
    use_hashes: bool = False,
    ignore_patterns: Optional[list[str]] = None,
    exclude_dot_files: bool = True,
    endpoint_url: Optional[str] = None,
    access_key: Optional[str] = None,
    secret_key: Optional[str] = None,
    region: Optional[str] = None,
    must_exist: bool = True,
) -> Union[LocalFiles, S3Files]:
    """Factory function to create a file source from a location string.

    Args:
        location: Local directory path or ``s3://bucket/prefix`` URL
        use_hashes: Compute MD5 hashes for local files, or trust ETags as
            MD5 hashes for S3 objects
        ignore_patterns: Extra gitignore-style patterns to skip
        exclude_dot_files: Skip dot files and dot folders
        endpoint_url: Custom S3 endpoint URL
        access_key: AWS access key ID
        secret_key: AWS secret access key
        region: AWS region
        must_exist: Whether a missing local directory is an error when
            listing (S3 prefixes always exist)

    Returns:
        Configured file source

    Raises:
        ConfigError: If the location is an S3 URL without a bucket
    """
    parsed = urlparse(location)

    if parsed.scheme == S3_SCHEME:
        if not parsed.netloc:
            raise ConfigError(f"S3 location requires a bucket: {location}")
        return S3Files(
            bucket=parsed.netloc,
            prefix=parsed.path,
            use_etag_as_hash=use_hashes,
            endpoint_url=endpoint_url,
            access_key=access_key,
            secret_key=secret_key,
            region=region,
            ignore_patterns=ignore_patterns,
            exclude_dot_files=exclude_dot_files,
        )

    if parsed.scheme and "://" in location:
        raise ConfigError(f"Unsupported location scheme: {parsed.scheme}")

    return LocalFiles(
        location,
        compute_md5_hashes=use_hashes,
        ignore_patterns=ignore_patterns,
        exclude_dot_files=exclude_dot_files,
        must_exist=must_exist,
    )


__all__ = ["LocalFiles", "S3Files", "create_source"]
