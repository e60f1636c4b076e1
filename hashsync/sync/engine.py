"""Core sync engine for executing sync operations."""

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Optional

from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn

from ..config import SyncOptions
from ..exceptions import HashSyncNotFoundError, HashSyncStorageError
from ..output import OutputFormatter
from ..storage import StorageBackend
from .comparator import (
    ActionSet,
    SyncAction,
    compute_deletion_set,
    compute_upload_set,
)
from .inventory import build_remote_inventory
from .operations import SyncOperations
from .scanner import LocalFile

logger = logging.getLogger(__name__)


def resolve_root(root: str) -> Path:
    """Resolve the sync root against the current working directory.

    Args:
        root: Absolute or relative path

    Returns:
        Absolute path of an existing directory

    Raises:
        HashSyncNotFoundError: If the path is not an existing directory
    """
    path = Path(root).expanduser()
    if not path.is_absolute():
        path = Path.cwd() / path
    if not path.is_dir():
        raise HashSyncNotFoundError(str(path))
    return path


class SyncEngine:
    """Syncs a local directory into a bucket by comparing content hashes.

    Each call to :meth:`sync` lists the bucket, hashes the local files that
    have a remote counterpart, uploads new and changed files and, when asked,
    deletes objects that no longer exist locally. The first failure aborts
    the run; uploads that already happened are left in place.
    """

    def __init__(
        self,
        storage: StorageBackend,
        output: Optional[OutputFormatter] = None,
        max_workers: int = 1,
    ):
        """Initialize sync engine.

        Args:
            storage: Storage backend used for every request
            output: Output formatter for displaying progress/status
            max_workers: Number of parallel upload workers (1 = sequential)
        """
        self.storage = storage
        self.output = output or OutputFormatter()
        self.max_workers = max(1, max_workers)

    def sync(self, options: SyncOptions) -> dict:
        """Sync a local directory with a bucket.

        Args:
            options: Sync options

        Returns:
            Dictionary with sync statistics

        Raises:
            HashSyncConfigError: If root or bucket is missing
            HashSyncNotFoundError: If the root is not a directory
            HashSyncStorageError: If any storage request fails
            HashSyncIOError: If a local file cannot be read

        Examples:
            >>> engine = SyncEngine(S3Storage.from_config(config))
            >>> options = SyncOptions(root="site", bucket="www", dry_run=True)
            >>> stats = engine.sync(options)
            >>> print(f"Would upload {stats['uploads']} files")
        """
        options.validate()
        path = resolve_root(str(options.root))
        bucket = str(options.bucket)

        if not self.output.quiet:
            target = f"{bucket}/{options.prefix}" if options.prefix else bucket
            self.output.info(f"Syncing: {path} -> {target}")
            if options.dry_run:
                self.output.info("Dry run: No changes will be made")
            self.output.print("")

        try:
            return self._sync(path, bucket, options)
        except HashSyncStorageError as e:
            logger.debug("Sync aborted by storage failure: %s", e)
            raise

    def _sync(self, path: Path, bucket: str, options: SyncOptions) -> dict:
        start_time = time.time()

        # Step 1: Build the remote inventory and compare local files
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
            disable=self.output.quiet,
        ) as progress:
            task = progress.add_task("Listing remote objects...", total=None)
            inventory = build_remote_inventory(
                self.storage, bucket, options.prefix, options.delimiter
            )
            progress.update(
                task, description=f"Found {len(inventory)} remote object(s)"
            )

            task = progress.add_task("Comparing local files...", total=None)
            action_set = compute_upload_set(
                path, inventory, prefix=options.prefix, force=options.force
            )
            progress.update(
                task,
                description=f"Compared {len(action_set.decisions)} local file(s)",
            )

        # Step 2: Work out deletions
        keys_to_delete: list[str] = []
        if options.delete:
            keys_to_delete = compute_deletion_set(
                inventory, action_set.retained_keys
            )

        stats = self._create_stats(action_set, keys_to_delete)
        self._display_sync_plan(stats, action_set, keys_to_delete, options.dry_run)

        # Step 3: Upload, then delete
        operations = SyncOperations(self.storage, bucket, dry_run=options.dry_run)
        self._execute_uploads(operations, action_set.uploads)
        if options.delete:
            operations.delete_keys(keys_to_delete)

        logger.debug("Sync finished in %.2fs", time.time() - start_time)

        if not self.output.quiet:
            self._display_summary(stats, options.dry_run)

        return stats

    def _create_stats(self, action_set: ActionSet, keys_to_delete: list[str]) -> dict:
        """Create the statistics dictionary for a planned sync.

        Args:
            action_set: Classified local files
            keys_to_delete: Keys selected for deletion

        Returns:
            Dictionary with counts per action
        """
        uploads = action_set.uploads
        return {
            "uploads": len(uploads),
            "upload_bytes": sum(f.size for f in uploads),
            "skips": len(action_set.skipped),
            "deletes_remote": len(keys_to_delete),
        }

    def _execute_uploads(
        self, operations: SyncOperations, uploads: list[LocalFile]
    ) -> None:
        """Upload files, stopping at the first failure.

        Args:
            operations: Sync operations bound to the target bucket
            uploads: Files to upload
        """
        if not uploads:
            logger.info("No objects to upload")
            return

        if operations.dry_run:
            for local_file in uploads:
                operations.upload_file(local_file)
            return

        with Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("{task.completed}/{task.total}"),
            disable=self.output.quiet,
        ) as progress:
            task = progress.add_task("Uploading files...", total=len(uploads))

            if self.max_workers > 1 and len(uploads) > 1:
                self._execute_uploads_parallel(
                    operations, uploads, lambda: progress.advance(task)
                )
            else:
                for local_file in uploads:
                    operations.upload_file(local_file)
                    progress.advance(task)

    def _execute_uploads_parallel(
        self,
        operations: SyncOperations,
        uploads: list[LocalFile],
        on_done: Callable[[], None],
    ) -> None:
        """Upload files using a thread pool.

        The first failure cancels every upload that has not started yet and
        is re-raised once the running uploads have finished.

        Args:
            operations: Sync operations bound to the target bucket
            uploads: Files to upload
            on_done: Callback invoked after each successful upload
        """
        logger.debug(
            "Uploading %d file(s) with %d workers", len(uploads), self.max_workers
        )
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures: dict[Future, LocalFile] = {
                executor.submit(operations.upload_file, local_file): local_file
                for local_file in uploads
            }
            for future in as_completed(futures):
                error = future.exception()
                if error is not None:
                    for pending in futures:
                        pending.cancel()
                    logger.debug("Upload of %s failed", futures[future].key)
                    raise error
                on_done()

    def _display_sync_plan(
        self,
        stats: dict,
        action_set: ActionSet,
        keys_to_delete: list[str],
        dry_run: bool,
    ) -> None:
        """Display sync plan to user.

        In dry-run mode every planned upload and deletion is listed.
        """
        if self.output.quiet:
            return

        self.output.info("Sync plan:")
        if stats["uploads"] > 0:
            size = self.output.format_size(stats["upload_bytes"])
            self.output.info(f"  ↑ Upload: {stats['uploads']} file(s) ({size})")
        if stats["deletes_remote"] > 0:
            count = stats["deletes_remote"]
            self.output.info(f"  ✗ Delete remote: {count} object(s)")
        if stats["skips"] > 0:
            self.output.info(f"  = Skip: {stats['skips']} file(s)")

        if dry_run:
            for decision in action_set.decisions:
                if decision.action == SyncAction.UPLOAD:
                    self.output.info(f"  ↑ {decision.key} ({decision.reason})")
            for key in keys_to_delete:
                self.output.info(f"  ✗ {key}")

        self.output.print("")

    def _display_summary(self, stats: dict, dry_run: bool) -> None:
        """Display sync summary.

        Args:
            stats: Statistics dictionary
            dry_run: Whether this was a dry run
        """
        if dry_run:
            self.output.success("Dry run complete!")
        else:
            self.output.success("Sync complete!")

        total_actions = stats["uploads"] + stats["deletes_remote"]
        if total_actions > 0:
            self.output.info(f"Total actions: {total_actions}")
            if stats["uploads"] > 0:
                label = "Would upload" if dry_run else "Uploaded"
                self.output.info(f"  {label}: {stats['uploads']}")
            if stats["deletes_remote"] > 0:
                label = "Would delete" if dry_run else "Deleted remotely"
                self.output.info(f"  {label}: {stats['deletes_remote']}")
        else:
            self.output.info("No changes needed - everything is in sync!")
