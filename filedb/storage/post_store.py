"""PostStore — one pretty-printed JSON document per post.

Layout: {base}/posts/{id}.json. The directory listing is the index;
listing and search read every document.

Writes (save, delete) are serialized by an in-process lock. Reads take
no lock, so a reader racing a writer can see a half-written document and
fail with StorageIOError. Sequence allocation happens inside the write
lock, so an issued ID always has its document written before the next
save starts.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import structlog
from pydantic import ValidationError

from filedb.exceptions import StorageIOError
from filedb.schemas.post import Post
from filedb.storage.sequence import SequenceGenerator

logger = structlog.get_logger()

POST_SEQUENCE = "post"


class PostStore:
    """CRUD, listing and linear search over post documents.

    Thread-safe for writers within one process. Results of find_all and
    search are ordered newest-first (id descending).
    """

    def __init__(self, posts_dir: Path, sequence: SequenceGenerator) -> None:
        self._lock = threading.RLock()
        self._posts_dir = Path(posts_dir)
        self._sequence = sequence

    @property
    def posts_dir(self) -> Path:
        return self._posts_dir

    @contextmanager
    def write_lock(self) -> Iterator[None]:
        """Hold the post write lock, blocking save and delete until exit."""
        with self._lock:
            yield

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def save(self, post: Post) -> Post:
        """Create (no id) or fully overwrite (id set) a post document.

        Returns a copy of the saved post with its id populated. No field
        merge happens here; callers merge before saving.
        """
        with self._lock:
            created = post.id is None
            if created:
                post = post.model_copy(update={"id": self._sequence.next(POST_SEQUENCE)})
            else:
                post = post.model_copy()

            path = self._path_for(post.id)
            try:
                self._posts_dir.mkdir(parents=True, exist_ok=True)
                path.write_text(post.to_document(), encoding="utf-8")
            except OSError as exc:
                raise StorageIOError(f"Failed to write post: {exc}", path=path) from exc

        logger.debug("Post saved", post_id=post.id, created=created)
        return post

    def delete_by_id(self, post_id: int) -> None:
        """Remove a post document. Missing documents are ignored."""
        with self._lock:
            path = self._path_for(post_id)
            try:
                existed = path.exists()
                path.unlink(missing_ok=True)
            except OSError as exc:
                raise StorageIOError(f"Failed to delete post: {exc}", path=path) from exc

        logger.debug("Post deleted", post_id=post_id, existed=existed)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def find_by_id(self, post_id: int) -> Post | None:
        """Read a single post, or None if it has no document."""
        path = self._path_for(post_id)
        try:
            return self._load(path)
        except FileNotFoundError:
            return None

    def find_all(self) -> list[Post]:
        """All posts, newest first. A missing directory means no posts."""
        posts = list(self._iter_posts())
        posts.sort(key=lambda p: p.id, reverse=True)
        return posts

    def search(self, keyword: str) -> list[Post]:
        """Posts whose title or content contains keyword, case-insensitively.

        Full scan of every document. Blank keywords are rejected; callers
        decide what a blank search means.
        """
        if keyword is None or not keyword.strip():
            raise ValueError("search keyword must not be blank")

        results = [p for p in self._iter_posts() if p.matches(keyword)]
        results.sort(key=lambda p: p.id, reverse=True)

        logger.debug("Post search", keyword=keyword, matches=len(results))
        return results

    def count(self) -> int:
        """Number of post documents on disk.

        Diagnostic; counts files without parsing them.
        """
        return len(self._document_paths())

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _path_for(self, post_id: int) -> Path:
        return self._posts_dir / f"{int(post_id)}.json"

    def _document_paths(self) -> list[Path]:
        if not self._posts_dir.is_dir():
            return []
        try:
            return [p for p in self._posts_dir.glob("*.json") if p.is_file()]
        except OSError as exc:
            raise StorageIOError(
                f"Failed to list posts: {exc}", path=self._posts_dir
            ) from exc

    def _iter_posts(self) -> Iterator[Post]:
        for path in self._document_paths():
            try:
                yield self._load(path)
            except FileNotFoundError:
                # Deleted between listing and reading
                logger.debug("Post vanished during scan", path=str(path))

    def _load(self, path: Path) -> Post:
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise
        except OSError as exc:
            raise StorageIOError(f"Failed to read post: {exc}", path=path) from exc
        except UnicodeDecodeError as exc:
            raise StorageIOError(f"Post document is not UTF-8: {path.name}", path=path) from exc

        try:
            post = Post.model_validate_json(text)
        except ValidationError as exc:
            raise StorageIOError(f"Malformed post document: {path.name}", path=path) from exc

        if post.id is None:
            raise StorageIOError(f"Post document has no id: {path.name}", path=path)
        return post
