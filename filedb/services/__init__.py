"""FileDB services — post policy and upload handling."""

from filedb.services.post_service import PostService
from filedb.services.uploads import EditorImageStore

__all__ = [
    "EditorImageStore",
    "PostService",
]
