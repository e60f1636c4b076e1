"""File comparison logic for sync operations."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from .hasher import file_content_hash
from .inventory import RemoteInventory
from .scanner import DirectoryScanner, LocalFile


class SyncAction(str, Enum):
    """Actions that can be taken during sync."""

    UPLOAD = "upload"
    """Upload local file to remote"""

    SKIP = "skip"
    """Skip file (already in sync)"""


@dataclass
class SyncDecision:
    """Represents a decision about how to sync a single local file."""

    action: SyncAction
    """Action to take"""

    reason: str
    """Human-readable reason for this decision"""

    key: str
    """Remote key the decision applies to"""

    local_file: LocalFile
    """Local file the decision applies to"""


@dataclass
class ActionSet:
    """Result of comparing the local tree with the remote inventory."""

    decisions: list[SyncDecision] = field(default_factory=list)
    """Decision for every local file, in traversal order"""

    @property
    def uploads(self) -> list[LocalFile]:
        """Local files that need to be transferred."""
        return [d.local_file for d in self.decisions if d.action == SyncAction.UPLOAD]

    @property
    def skipped(self) -> list[LocalFile]:
        """Local files that are already in sync."""
        return [d.local_file for d in self.decisions if d.action == SyncAction.SKIP]

    @property
    def retained_keys(self) -> frozenset[str]:
        """Keys that will exist remotely after the sync (uploaded or skipped)."""
        return frozenset(d.key for d in self.decisions)


class FileComparator:
    """Classifies local files as upload or skip by comparing content hashes."""

    def __init__(
        self,
        force: bool = False,
        hasher: Callable[[Path], str] = file_content_hash,
    ):
        """Initialize file comparator.

        Args:
            force: Upload every file without hashing
            hasher: Function returning the hex digest of a file
        """
        self.force = force
        self.hasher = hasher

    def compare(
        self, local_files: Iterable[LocalFile], inventory: RemoteInventory
    ) -> ActionSet:
        """Compare local files with the remote inventory.

        Args:
            local_files: Local files in traversal order
            inventory: Remote key to digest mapping

        Returns:
            ActionSet with one decision per local file
        """
        return ActionSet(
            decisions=[self.compare_file(f, inventory) for f in local_files]
        )

    def compare_file(
        self, local_file: LocalFile, inventory: RemoteInventory
    ) -> SyncDecision:
        """Decide what to do with a single local file."""
        if self.force:
            return SyncDecision(
                action=SyncAction.UPLOAD,
                reason="Forced upload",
                key=local_file.key,
                local_file=local_file,
            )

        if local_file.key not in inventory:
            return SyncDecision(
                action=SyncAction.UPLOAD,
                reason="New local file",
                key=local_file.key,
                local_file=local_file,
            )

        # Only hash files that have a remote counterpart
        if not inventory.matches(local_file.key, self.hasher(local_file.path)):
            return SyncDecision(
                action=SyncAction.UPLOAD,
                reason="Content changed",
                key=local_file.key,
                local_file=local_file,
            )

        return SyncDecision(
            action=SyncAction.SKIP,
            reason="Content unchanged",
            key=local_file.key,
            local_file=local_file,
        )


def compute_upload_set(
    root: Path,
    inventory: RemoteInventory,
    prefix: Optional[str] = None,
    force: bool = False,
) -> ActionSet:
    """Scan a directory and classify every file against the inventory.

    Args:
        root: Absolute sync root
        inventory: Remote key to digest mapping
        prefix: Optional key prefix
        force: Upload every file regardless of change status

    Returns:
        ActionSet (empty for a directory without files)
    """
    local_files = DirectoryScanner().scan_local(root, prefix=prefix)
    return FileComparator(force=force).compare(local_files, inventory)


def compute_deletion_set(
    inventory: RemoteInventory, retained_keys: Iterable[str]
) -> list[str]:
    """Return the inventory keys that no local file corresponds to.

    Args:
        inventory: Remote key to digest mapping
        retained_keys: Keys of all local files

    Returns:
        Sorted list of keys to delete

    Examples:
        >>> inventory = RemoteInventory([("A", "1"), ("B", "2"), ("C", "3")])
        >>> compute_deletion_set(inventory, {"A"})
        ['B', 'C']
    """
    retained = set(retained_keys)
    return sorted(key for key in inventory if key not in retained)
