"""Object storage backend for hashsync.

The sync engine only depends on the :class:`StorageBackend` protocol. The
:class:`S3Storage` implementation talks to Amazon S3 (or any S3-compatible
endpoint) through boto3.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, BinaryIO, Protocol

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import HashSyncConfigError, HashSyncStorageError
from .utils import MAX_DELETE_BATCH_SIZE

if TYPE_CHECKING:
    from .config import Config

logger = logging.getLogger(__name__)

HTTP_OK = 200


@dataclass
class StorageObject:
    """A single object returned by a listing request."""

    key: str
    """Object key"""

    etag: str
    """Raw ETag as returned by the backend (usually a quoted MD5 hex digest)"""


@dataclass
class StorageResult:
    """Outcome of a mutating request."""

    status_code: int
    """HTTP status code reported by the backend"""

    errors: list[dict[str, Any]] = field(default_factory=list)
    """Per-key errors reported by a batch request"""

    @property
    def ok(self) -> bool:
        """True when the request fully succeeded."""
        return self.status_code == HTTP_OK and not self.errors


@dataclass
class ListObjectsPage:
    """One page of a listing request."""

    status_code: int
    """HTTP status code reported by the backend"""

    objects: list[StorageObject] = field(default_factory=list)
    """Objects on this page"""

    next_continuation_token: str | None = None
    """Token for the next page, None on the last page"""

    @property
    def ok(self) -> bool:
        """True when the page was listed successfully."""
        return self.status_code == HTTP_OK


class StorageBackend(Protocol):
    """Operations the sync engine needs from an object store."""

    def list_objects(
        self,
        bucket: str,
        prefix: str | None = None,
        delimiter: str | None = None,
        continuation_token: str | None = None,
    ) -> ListObjectsPage: ...

    def put_object(
        self, bucket: str, key: str, body: BinaryIO, content_type: str
    ) -> StorageResult: ...

    def delete_objects(self, bucket: str, keys: list[str]) -> StorageResult: ...


def _status_code(response: dict[str, Any]) -> int:
    return int(response.get("ResponseMetadata", {}).get("HTTPStatusCode", 0))


class S3Storage:
    """Storage backend backed by a boto3 S3 client."""

    def __init__(self, client: Any):
        """Initialize the backend.

        Args:
            client: boto3 S3 client (``boto3.client("s3")`` or compatible)
        """
        self.client = client

    @classmethod
    def from_config(
        cls,
        config: Config,
        profile: str | None = None,
        region: str | None = None,
        endpoint_url: str | None = None,
    ) -> S3Storage:
        """Create a backend using a boto3 session built from configuration.

        Explicit arguments take precedence over ``config``. botocore retries
        are limited to a single attempt, so any failure surfaces immediately.
        No request is sent while building the client.

        Args:
            config: hashsync configuration
            profile: AWS profile name
            region: AWS region name
            endpoint_url: Custom S3 endpoint URL

        Returns:
            S3Storage instance

        Raises:
            HashSyncConfigError: If the profile or settings are invalid
        """
        boto_config = BotoConfig(
            connect_timeout=config.connect_timeout,
            read_timeout=config.read_timeout,
            retries={"max_attempts": 1, "mode": "standard"},
        )
        try:
            session = boto3.Session(
                profile_name=profile or config.profile,
                region_name=region or config.region,
            )
            client = session.client(
                "s3",
                endpoint_url=endpoint_url or config.endpoint_url,
                config=boto_config,
            )
        except BotoCoreError as e:
            raise HashSyncConfigError(f"Could not create S3 client: {e}") from e
        return cls(client)

    def _call(self, description: str, method: str, **kwargs: Any) -> dict[str, Any]:
        """Invoke a client method, translating botocore errors.

        Args:
            description: Human-readable description used in error messages
            method: Name of the client method
            **kwargs: Request parameters

        Returns:
            Raw response dictionary

        Raises:
            HashSyncStorageError: If the request fails
        """
        try:
            response: dict[str, Any] = getattr(self.client, method)(**kwargs)
        except ClientError as e:
            error = e.response.get("Error", {})
            status = _status_code(e.response) or None
            message = error.get("Message") or error.get("Code") or str(e)
            raise HashSyncStorageError(
                f"Error {description}: {message}", status_code=status
            ) from e
        except BotoCoreError as e:
            raise HashSyncStorageError(f"Error {description}: {e}") from e
        return response

    def list_objects(
        self,
        bucket: str,
        prefix: str | None = None,
        delimiter: str | None = None,
        continuation_token: str | None = None,
    ) -> ListObjectsPage:
        """List one page of objects in a bucket.

        Args:
            bucket: Bucket name
            prefix: Only list keys starting with this prefix
            delimiter: Group keys by this delimiter (grouped prefixes are
                not returned as objects)
            continuation_token: Token from the previous page

        Returns:
            ListObjectsPage
        """
        params: dict[str, Any] = {"Bucket": bucket}
        if prefix:
            params["Prefix"] = prefix
        if delimiter:
            params["Delimiter"] = delimiter
        if continuation_token:
            params["ContinuationToken"] = continuation_token

        logger.debug("Listing objects in %s (params=%s)", bucket, params)
        response = self._call(
            f"listing objects in bucket '{bucket}'", "list_objects_v2", **params
        )

        objects = [
            StorageObject(key=item["Key"], etag=item.get("ETag", ""))
            for item in response.get("Contents", [])
        ]
        next_token = None
        if response.get("IsTruncated"):
            next_token = response.get("NextContinuationToken")

        return ListObjectsPage(
            status_code=_status_code(response),
            objects=objects,
            next_continuation_token=next_token,
        )

    def put_object(
        self, bucket: str, key: str, body: BinaryIO, content_type: str
    ) -> StorageResult:
        """Upload a single object.

        Args:
            bucket: Bucket name
            key: Target key
            body: Open binary file with the object content
            content_type: Content-Type to store with the object

        Returns:
            StorageResult
        """
        response = self._call(
            f"putting object '{key}'",
            "put_object",
            Bucket=bucket,
            Key=key,
            Body=body,
            ContentType=content_type,
        )
        return StorageResult(status_code=_status_code(response))

    def delete_objects(self, bucket: str, keys: list[str]) -> StorageResult:
        """Delete a set of objects.

        S3 accepts at most 1000 keys per request, so larger sets are sent in
        consecutive batches. The first failing batch is returned without
        sending the remaining ones.

        Args:
            bucket: Bucket name
            keys: Keys to delete

        Returns:
            StorageResult of the last request sent
        """
        result = StorageResult(status_code=HTTP_OK)
        for start in range(0, len(keys), MAX_DELETE_BATCH_SIZE):
            batch = keys[start : start + MAX_DELETE_BATCH_SIZE]
            response = self._call(
                f"deleting {len(batch)} object(s)",
                "delete_objects",
                Bucket=bucket,
                Delete={"Objects": [{"Key": k} for k in batch], "Quiet": True},
            )
            result = StorageResult(
                status_code=_status_code(response),
                errors=list(response.get("Errors", [])),
            )
            if not result.ok:
                break
        return result
