"""Remote inventory: a snapshot of key to digest for a bucket."""

import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import Optional

from ..exceptions import HashSyncStorageError
from ..storage import StorageBackend

logger = logging.getLogger(__name__)


class RemoteInventory(Mapping[str, str]):
    """Read-only mapping of remote key to content digest.

    Examples:
        >>> inventory = RemoteInventory([("a.txt", "abc123")])
        >>> inventory.matches("a.txt", "ABC123")
        True
        >>> inventory.matches("b.txt", "ABC123")
        False
    """

    def __init__(self, entries: Iterable[tuple[str, str]] = ()):
        """Build the inventory.

        Args:
            entries: (key, digest) pairs; a repeated key keeps the last digest
        """
        self._digests: dict[str, str] = {}
        for key, digest in entries:
            self._digests[key] = digest

    def __getitem__(self, key: str) -> str:
        return self._digests[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._digests)

    def __len__(self) -> int:
        return len(self._digests)

    def __repr__(self) -> str:
        return f"RemoteInventory({len(self)} object(s))"

    def matches(self, key: str, digest: str) -> bool:
        """Check whether the key exists with the given digest.

        Digests are compared case-insensitively.
        """
        remote_digest = self._digests.get(key)
        if remote_digest is None:
            return False
        return remote_digest.lower() == digest.lower()


def normalize_etag(etag: str) -> str:
    """Strip the quote characters S3 puts around an ETag."""
    return etag.replace('"', "")


def build_remote_inventory(
    storage: StorageBackend,
    bucket: str,
    prefix: Optional[str] = None,
    delimiter: Optional[str] = None,
) -> RemoteInventory:
    """List every object in a bucket and map keys to their digests.

    Pages are requested until a response carries no continuation token.
    Any failed page aborts the listing; a partial inventory is never
    returned.

    Args:
        storage: Storage backend
        bucket: Bucket name
        prefix: Only list keys starting with this prefix
        delimiter: Listing delimiter

    Returns:
        RemoteInventory

    Raises:
        HashSyncStorageError: If a listing request fails
    """
    entries: list[tuple[str, str]] = []
    continuation_token: Optional[str] = None
    pages = 0

    while True:
        page = storage.list_objects(
            bucket,
            prefix=prefix,
            delimiter=delimiter,
            continuation_token=continuation_token,
        )
        pages += 1
        if not page.ok:
            raise HashSyncStorageError(
                f"Error listing objects from bucket '{bucket}'",
                status_code=page.status_code,
            )

        for obj in page.objects:
            entries.append((obj.key, normalize_etag(obj.etag)))

        continuation_token = page.next_continuation_token
        if continuation_token is None:
            break

    inventory = RemoteInventory(entries)
    logger.debug(
        "Listed %d object(s) from %s in %d page(s)", len(inventory), bucket, pages
    )
    return inventory
