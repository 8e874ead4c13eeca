"""FileDB schemas — typed records shared by stores and services."""

from filedb.schemas.gc import ImageGcResult
from filedb.schemas.post import Post

__all__ = [
    "ImageGcResult",
    "Post",
]
