"""FileSource for a prefix in an S3 bucket."""

import asyncio
import logging
from datetime import datetime
from typing import Any, Optional

import boto3

from ..exceptions import S3FilesError
from ..models import FileEntry
from ..sync.ignore import IgnorePatterns
from ..utils import parse_etag_as_md5, to_utc

logger = logging.getLogger(__name__)


class S3Files:
    """A FileSource for files under a prefix in an S3 bucket.

    Works with any S3-compatible service (AWS, MinIO, OVH, ...). S3 cannot
    set an object's modified time, so ``set_modified`` always returns False
    and the sync engine adjusts the other side instead.
    """

    def __init__(
        self,
        bucket: str,
        prefix: str = "",
        use_etag_as_hash: bool = False,
        client: Any = None,
        endpoint_url: Optional[str] = None,
        access_key: Optional[str] = None,
        secret_key: Optional[str] = None,
        region: Optional[str] = None,
        ignore_patterns: Optional[list[str]] = None,
        exclude_dot_files: bool = True,
    ) -> None:
        """Initialize S3 file source.

        Args:
            bucket: S3 bucket name
            prefix: Key prefix acting as the root folder
            use_etag_as_hash: If set, the ETag of each object is assumed to be
                an MD5 hash of its contents when it is a 32 digit hex value
            client: Existing boto3 S3 client (other connection args are
                ignored when given)
            endpoint_url: Custom endpoint URL (for MinIO, OVH, etc.)
            access_key: AWS access key ID
            secret_key: AWS secret access key
            region: AWS region
            ignore_patterns: Gitignore-style patterns for keys to skip
            exclude_dot_files: Whether to skip keys with a segment starting
                with a dot
        """
        self.bucket = bucket
        self.prefix = prefix.strip("/")
        self.use_etag_as_hash = use_etag_as_hash
        self.ignore = IgnorePatterns(ignore_patterns)
        self.exclude_dot_files = exclude_dot_files
        self._endpoint_url = endpoint_url

        if client is None:
            client = boto3.client(
                "s3",
                endpoint_url=endpoint_url,
                aws_access_key_id=access_key,
                aws_secret_access_key=secret_key,
                region_name=region,
            )
        self._client = client

    @property
    def location(self) -> str:
        """Return the S3 bucket location."""
        url = f"s3://{self.bucket}/{self.prefix}"
        if self._endpoint_url:
            return f"S3: {self._endpoint_url} {url}"
        return f"S3: {url}"

    def _key(self, path: str) -> str:
        """Get the S3 key for a relative path."""
        path = path.lstrip("/")
        if not self.prefix:
            return path
        return f"{self.prefix}/{path}"

    def _relative_path(self, key: Optional[str]) -> str:
        """Strip the prefix from an object key."""
        if not key:
            raise S3FilesError("One of the objects returned does not have a key")
        if not self.prefix:
            return key
        prefix = self.prefix + "/"
        if not key.startswith(prefix):
            raise S3FilesError(
                f"One of the objects returned has an incorrect prefix: {key}"
            )
        return key[len(prefix) :]

    def list_files_sync(self) -> list[FileEntry]:
        list_prefix = f"{self.prefix}/" if self.prefix else ""
        paginator = self._client.get_paginator("list_objects_v2")

        files: list[FileEntry] = []
        for page in paginator.paginate(Bucket=self.bucket, Prefix=list_prefix):
            for obj in page.get("Contents", []):
                path = self._relative_path(obj.get("Key"))
                # Skip the prefix itself and folder placeholder objects
                if not path or path.endswith("/"):
                    continue
                if self.ignore.is_path_excluded(path, self.exclude_dot_files):
                    logger.debug(f"Ignoring (from rules): {path}")
                    continue

                md5_hash = None
                if self.use_etag_as_hash:
                    md5_hash = parse_etag_as_md5(obj.get("ETag"))

                files.append(
                    FileEntry(
                        path=path,
                        modified=to_utc(obj.get("LastModified")),
                        size=obj.get("Size"),
                        md5_hash=md5_hash,
                    )
                )

        logger.debug(f"Listed {len(files)} object(s) in {self.location}")
        return files

    def read_file_sync(self, path: str) -> bytes:
        response = self._client.get_object(Bucket=self.bucket, Key=self._key(path))
        body: bytes = response["Body"].read()
        return body

    def write_file_sync(self, path: str, data: bytes) -> None:
        self._client.put_object(Bucket=self.bucket, Key=self._key(path), Body=data)

    async def list_files(self) -> list[FileEntry]:
        return await asyncio.to_thread(self.list_files_sync)

    async def read_file(self, path: str) -> bytes:
        return await asyncio.to_thread(self.read_file_sync, path)

    async def write_file(self, path: str, data: bytes) -> None:
        await asyncio.to_thread(self.write_file_sync, path, data)

    async def set_modified(self, path: str, modified: Optional[datetime]) -> bool:
        return False
