"""Directory scanning utilities for sync operations."""

import logging
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Optional, Union

from ..exceptions import HashSyncIOError

logger = logging.getLogger(__name__)


def make_remote_key(
    relative_path: Union[str, PurePath], prefix: Optional[str] = None
) -> str:
    """Build the remote key for a file.

    Path separators are normalized to forward slashes whatever the host
    convention, so the key never contains a backslash.

    Args:
        relative_path: Path of the file relative to the sync root
        prefix: Optional key prefix (used as-is, e.g. "backups/")

    Returns:
        Remote key

    Examples:
        >>> make_remote_key("sub/dir/file.txt", "pfx/")
        'pfx/sub/dir/file.txt'
        >>> from pathlib import PureWindowsPath
        >>> make_remote_key(PureWindowsPath("sub\\\\file.txt"))
        'sub/file.txt'
    """
    if isinstance(relative_path, PurePath):
        relative_path = relative_path.as_posix()
    key = f"{prefix or ''}{relative_path}"
    return key.replace("\\", "/")


@dataclass
class LocalFile:
    """Represents a local file with its remote key."""

    path: Path
    """Absolute path to the file"""

    relative_path: str
    """Relative path (using forward slashes for cross-platform compatibility)"""

    key: str
    """Remote key (prefix + relative path)"""

    size: int = 0
    """File size in bytes"""

    @classmethod
    def from_path(
        cls, file_path: Path, base_path: Path, prefix: Optional[str] = None
    ) -> "LocalFile":
        """Create LocalFile from a path.

        Args:
            file_path: Absolute path to the file
            base_path: Sync root used to calculate the relative path
            prefix: Optional key prefix

        Returns:
            LocalFile instance
        """
        relative = file_path.relative_to(base_path)
        return cls(
            path=file_path,
            relative_path=relative.as_posix(),
            key=make_remote_key(relative, prefix),
            size=file_path.stat().st_size,
        )


class DirectoryScanner:
    """Scans a directory tree and builds the list of local files.

    Entries are visited in name order at every level, so the same tree always
    produces the same list.

    Examples:
        >>> scanner = DirectoryScanner()
        >>> files = scanner.scan_local(Path("/sync/folder"), prefix="site/")
        >>> [f.key for f in files]  # doctest: +SKIP
        ['site/css/main.css', 'site/index.html']
    """

    def scan_local(
        self, directory: Path, prefix: Optional[str] = None
    ) -> list[LocalFile]:
        """Recursively scan a local directory.

        Args:
            directory: Sync root (should be absolute)
            prefix: Optional key prefix

        Returns:
            List of LocalFile objects, one per regular file. Symlinked
            directories are not followed.

        Raises:
            HashSyncIOError: If a directory cannot be read
        """
        files: list[LocalFile] = []
        self._scan(directory, directory, prefix, files)
        logger.debug("Found %d local file(s) under %s", len(files), directory)
        return files

    def _scan(
        self,
        directory: Path,
        base_path: Path,
        prefix: Optional[str],
        files: list[LocalFile],
    ) -> None:
        try:
            items = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise HashSyncIOError(str(directory), e.strerror or str(e)) from e

        for item in items:
            if item.is_file():
                try:
                    files.append(LocalFile.from_path(item, base_path, prefix))
                except OSError as e:
                    raise HashSyncIOError(str(item), e.strerror or str(e)) from e
            elif item.is_symlink() and item.is_dir():
                logger.debug("Skipping symlinked directory %s", item)
            elif item.is_dir():
                self._scan(item, base_path, prefix, files)
