"""Hash-based sync engine: inventory, diff and reconcile."""

from .comparator import (
    ActionSet,
    FileComparator,
    SyncAction,
    SyncDecision,
    compute_deletion_set,
    compute_upload_set,
)
from .engine import SyncEngine, resolve_root
from .hasher import EMPTY_FILE_HASH, file_content_hash
from .inventory import RemoteInventory, build_remote_inventory
from .operations import SyncOperations
from .scanner import DirectoryScanner, LocalFile, make_remote_key

__all__ = [
    "SyncEngine",
    "SyncOperations",
    "resolve_root",
    "ActionSet",
    "FileComparator",
    "SyncAction",
    "SyncDecision",
    "compute_deletion_set",
    "compute_upload_set",
    "EMPTY_FILE_HASH",
    "file_content_hash",
    "RemoteInventory",
    "build_remote_inventory",
    "DirectoryScanner",
    "LocalFile",
    "make_remote_key",
]
