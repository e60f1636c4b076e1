"""hashsync - CLI tool for syncing a directory to S3 by content hash."""

from .exceptions import (
    HashSyncConfigError,
    HashSyncError,
    HashSyncIOError,
    HashSyncNotFoundError,
    HashSyncStorageError,
)
from .storage import S3Storage, StorageBackend
from .sync import SyncEngine

__version__ = "0.1.0"

__all__ = [
    "HashSyncConfigError",
    "HashSyncError",
    "HashSyncIOError",
    "HashSyncNotFoundError",
    "HashSyncStorageError",
    "S3Storage",
    "StorageBackend",
    "SyncEngine",
    "__version__",
]
