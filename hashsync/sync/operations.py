"""Storage mutations performed by a sync: uploads and batch deletes."""

import logging

from ..exceptions import HashSyncIOError, HashSyncStorageError
from ..storage import StorageBackend
from ..utils import guess_content_type
from .scanner import LocalFile

logger = logging.getLogger(__name__)


class SyncOperations:
    """Upload and delete operations against a bucket.

    Every failed request raises immediately; nothing already written is
    rolled back.
    """

    def __init__(self, storage: StorageBackend, bucket: str, dry_run: bool = False):
        """Initialize sync operations.

        Args:
            storage: Storage backend
            bucket: Target bucket
            dry_run: Log the actions without calling the backend
        """
        self.storage = storage
        self.bucket = bucket
        self.dry_run = dry_run

    def upload_file(self, local_file: LocalFile) -> None:
        """Upload a local file to its remote key.

        Args:
            local_file: Local file to upload

        Raises:
            HashSyncIOError: If the file cannot be opened
            HashSyncStorageError: If the backend rejects the upload
        """
        content_type = guess_content_type(local_file.path)
        logger.info("Uploading object '%s'", local_file.key)

        if self.dry_run:
            return

        try:
            f = open(local_file.path, "rb")
        except OSError as e:
            raise HashSyncIOError(str(local_file.path), e.strerror or str(e)) from e

        with f:
            result = self.storage.put_object(
                self.bucket, local_file.key, f, content_type
            )

        if not result.ok:
            raise HashSyncStorageError(
                f"Error putting object '{local_file.key}' to bucket '{self.bucket}'",
                status_code=result.status_code,
            )

    def delete_keys(self, keys: list[str]) -> None:
        """Delete remote objects in a single batch request.

        Args:
            keys: Keys to delete (no request is made when empty)

        Raises:
            HashSyncStorageError: If the backend rejects the deletion
        """
        if not keys:
            logger.info("No objects to remove")
            return

        joined = "', '".join(keys)
        logger.info("Deleting objects '%s'", joined)

        if self.dry_run:
            return

        result = self.storage.delete_objects(self.bucket, keys)
        if not result.ok:
            raise HashSyncStorageError(
                f"Error deleting objects '{joined}' from bucket "
                f"'{self.bucket}'",
                status_code=result.status_code,
            )
