"""Exceptions raised by hashsync."""

from typing import Optional


class HashSyncError(Exception):
    """Base exception for all hashsync errors."""


class HashSyncConfigError(HashSyncError):
    """Required configuration is missing or invalid."""


class HashSyncNotFoundError(HashSyncError):
    """The sync root does not exist as a directory."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Could not resolve part or all of path '{path}'.")


class HashSyncStorageError(HashSyncError):
    """A list, put or delete request against the bucket failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class HashSyncIOError(HashSyncError):
    """A local file could not be read."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        message = f"Could not read file '{path}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
