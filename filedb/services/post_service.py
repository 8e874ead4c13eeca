"""Post service — caller-level policy on top of PostStore.

Stamps timestamps, merges editable fields on update, and turns absence
into PostNotFoundError. The store itself treats absence as None/no-op.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Callable

import structlog

from filedb.exceptions import PostNotFoundError
from filedb.schemas.post import Post
from filedb.services.uploads import file_extension, write_upload
from filedb.storage.post_store import PostStore

logger = structlog.get_logger()

# Fields an update request may change; everything else is carried over
EDITABLE_FIELDS = ("title", "content", "writer")


def _timestamp(now: datetime) -> str:
    return now.isoformat()


class PostService:
    """Create, update, read, search and delete posts."""

    def __init__(
        self,
        store: PostStore,
        upload_dir: Path,
        image_url_prefix: str = "/images",
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._store = store
        self._upload_dir = Path(upload_dir)
        self._image_url_prefix = image_url_prefix.rstrip("/")
        self._now = now

    def create(self, request: Post) -> Post:
        """Store a new post. Any id on the request is ignored."""
        stamp = _timestamp(self._now())
        post = request.model_copy(
            update={"id": None, "created_at": stamp, "updated_at": stamp}
        )
        saved = self._store.save(post)
        logger.info("Post created", post_id=saved.id, writer=saved.writer)
        return saved

    def update(self, post_id: int, request: Post) -> Post:
        """Replace the editable fields of an existing post."""
        existing = self.get(post_id)
        changes = {name: getattr(request, name) for name in EDITABLE_FIELDS}
        changes["updated_at"] = _timestamp(self._now())

        saved = self._store.save(existing.model_copy(update=changes))
        logger.info("Post updated", post_id=post_id)
        return saved

    def get(self, post_id: int) -> Post:
        post = self._store.find_by_id(post_id)
        if post is None:
            raise PostNotFoundError(post_id)
        return post

    def list(self) -> list[Post]:
        return self._store.find_all()

    def search(self, keyword: str | None) -> list[Post]:
        """Keyword search; a blank keyword lists everything."""
        if keyword is None or not keyword.strip():
            return self.list()
        return self._store.search(keyword)

    def delete(self, post_id: int) -> None:
        if self._store.find_by_id(post_id) is None:
            raise PostNotFoundError(post_id)
        self._store.delete_by_id(post_id)
        logger.info("Post deleted", post_id=post_id)

    def attach_image(self, post_id: int, data: bytes, original_filename: str | None) -> Post:
        """Store an image as {upload}/{id}{ext} and link it from the post."""
        post = self.get(post_id)

        filename = f"{post_id}{file_extension(original_filename)}"
        write_upload(self._upload_dir / filename, data)

        saved = self._store.save(
            post.model_copy(
                update={
                    "image_filename": filename,
                    "image_path": f"{self._image_url_prefix}/{filename}",
                    "updated_at": _timestamp(self._now()),
                }
            )
        )
        logger.info("Post image attached", post_id=post_id, filename=filename)
        return saved
