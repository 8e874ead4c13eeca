"""FileDB exception hierarchy.

All custom exceptions inherit from FileDBError, allowing callers
to catch broad or specific error categories as needed.

Store-level absence is never an exception: lookups return None and
deleting a missing document is a no-op. PostNotFoundError is raised
only by callers that require a post to exist.
"""

from pathlib import Path


class FileDBError(Exception):
    """Base exception for all FileDB errors."""


class StorageIOError(FileDBError):
    """Raised when a persisted file cannot be read, written, or parsed.

    Examples: directory creation failure, permission denied,
    malformed post document, unserializable sequence mapping.
    """

    def __init__(self, message: str = "", path: Path | str | None = None) -> None:
        self.path = Path(path) if path is not None else None
        super().__init__(message)


class PostNotFoundError(FileDBError):
    """Raised when a caller requires a post that has no document."""

    def __init__(self, post_id: int) -> None:
        self.post_id = post_id
        super().__init__(f"Post not found: {post_id}")


class InvalidUploadError(FileDBError):
    """Raised when an uploaded image payload is empty."""
