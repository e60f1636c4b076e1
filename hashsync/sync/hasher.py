"""Content hashing for change detection."""

import hashlib
from pathlib import Path
from typing import Union

from ..exceptions import HashSyncIOError
from ..utils import DEFAULT_HASH_CHUNK_SIZE

EMPTY_FILE_HASH = "D41D8CD98F00B204E9800998ECF8427E"


def file_content_hash(
    file_path: Union[str, Path], chunk_size: int = DEFAULT_HASH_CHUNK_SIZE
) -> str:
    """Calculate the MD5 hash of a file's contents.

    The file is streamed in chunks, so arbitrarily large files can be hashed
    without loading them into memory. The result matches the ETag S3 stores
    for objects uploaded in a single request.

    Args:
        file_path: Path to the file
        chunk_size: Number of bytes read per iteration

    Returns:
        32-character uppercase hex digest

    Raises:
        HashSyncIOError: If the file cannot be opened or read

    Examples:
        >>> file_content_hash(Path("empty.txt"))  # doctest: +SKIP
        'D41D8CD98F00B204E9800998ECF8427E'
    """
    md5 = hashlib.md5()
    try:
        with open(file_path, "rb") as f:
            for chunk in iter(lambda: f.read(chunk_size), b""):
                md5.update(chunk)
    except OSError as e:
        raise HashSyncIOError(str(file_path), e.strerror or str(e)) from e
    return md5.hexdigest().upper()
