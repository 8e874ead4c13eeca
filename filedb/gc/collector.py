"""OrphanImageCollector — mark-and-sweep over the editor image directory.

Roots are the `images` arrays of every post's content; the heap is the
flat editor image directory. Files no post references are deleted.

The post write lock is held for the whole run, so no post can be saved
or deleted between marking and sweeping. An image uploaded but not yet
referenced by a saved post is an orphan and will be collected.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from filedb.exceptions import StorageIOError
from filedb.gc.references import ImageReferenceScanner
from filedb.schemas.gc import ImageGcResult
from filedb.storage.post_store import PostStore

logger = structlog.get_logger()


class OrphanImageCollector:
    """Deletes editor images that no post references.

    Deletion is best-effort: a file that cannot be removed is logged and
    left out of `deleted_file_names`, and the run continues.
    """

    def __init__(
        self,
        post_store: PostStore,
        image_dir: Path,
        scanner: ImageReferenceScanner | None = None,
    ) -> None:
        self._post_store = post_store
        self._image_dir = Path(image_dir)
        self._scanner = scanner or ImageReferenceScanner()

    @property
    def image_dir(self) -> Path:
        return self._image_dir

    def collect(self) -> ImageGcResult:
        """Run one mark-and-sweep pass and report what happened."""
        with self._post_store.write_lock():
            referenced = self._scanner.scan(self._post_store.find_all())
            image_files = self._list_image_files()
            orphans = [f for f in image_files if f.name not in referenced]
            deleted = self._delete_files(orphans)

        result = ImageGcResult(
            referenced_image_count=len(referenced),
            total_image_file_count=len(image_files),
            orphan_image_count=len(orphans),
            deleted_file_names=deleted,
        )
        logger.info("Orphan image collection", **result.summary())
        return result

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _list_image_files(self) -> list[Path]:
        """Regular files directly under the image directory, by name."""
        if not self._image_dir.is_dir():
            return []
        try:
            return sorted(
                (p for p in self._image_dir.iterdir() if p.is_file()),
                key=lambda p: p.name,
            )
        except OSError as exc:
            raise StorageIOError(
                f"Failed to list image directory: {exc}", path=self._image_dir
            ) from exc

    def _delete_files(self, files: list[Path]) -> list[str]:
        deleted: list[str] = []
        for path in files:
            try:
                path.unlink()
            except OSError as exc:
                logger.warning(
                    "Failed to delete orphan image",
                    path=str(path),
                    error=str(exc),
                )
                continue
            deleted.append(path.name)
        return deleted
