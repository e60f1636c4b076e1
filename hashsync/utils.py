"""Utility functions for hashsync."""

import mimetypes
from pathlib import Path
from typing import Union

# =============================================================================
# Constants for file operations
# =============================================================================

# Read size when streaming a file through the hash function (1 MB)
DEFAULT_HASH_CHUNK_SIZE: int = 1024 * 1024

# Content type used when the extension is unknown
DEFAULT_CONTENT_TYPE: str = "application/octet-stream"

# S3 refuses DeleteObjects requests with more keys than this
MAX_DELETE_BATCH_SIZE: int = 1000

# Upper bound for parallel upload workers
MAX_WORKERS: int = 32


# =============================================================================
# Content type utilities
# =============================================================================


def guess_content_type(file_path: Union[str, Path]) -> str:
    """Guess the content type of a file from its extension.

    Args:
        file_path: Path (or bare name) of the file

    Returns:
        MIME type string (defaults to 'application/octet-stream')

    Examples:
        >>> guess_content_type("index.html")
        'text/html'
        >>> guess_content_type("archive.unknownext")
        'application/octet-stream'
    """
    mime_type, _ = mimetypes.guess_type(str(file_path), strict=False)
    if not mime_type:
        mime_type = DEFAULT_CONTENT_TYPE
    return mime_type


# =============================================================================
# Size formatting utilities
# =============================================================================


def format_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string (e.g., "1.5 MB", "256 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / 1024 / 1024:.1f} MB"
    else:
        return f"{size_bytes / 1024 / 1024 / 1024:.1f} GB"
