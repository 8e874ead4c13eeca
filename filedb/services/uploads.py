"""Upload file handling for editor images and post attachments.

Editor images land in {upload}/editor/{epochMillis}-{random}{ext}; the
orphan collector sweeps that directory. Post attachments are written by
PostService.attach_image to {upload}/{id}{ext} and are never collected.
"""

from __future__ import annotations

import random
import time
from pathlib import Path
from typing import Callable

import structlog

from filedb.exceptions import InvalidUploadError, StorageIOError

logger = structlog.get_logger()

DEFAULT_EXTENSION = ".dat"


def file_extension(original_filename: str | None) -> str:
    """Extension from the last `.` of a client filename, including the dot."""
    if original_filename:
        _, dot, ext = original_filename.rpartition(".")
        if dot and ext.strip() and "/" not in ext and "\\" not in ext:
            return "." + ext
    return DEFAULT_EXTENSION


def write_upload(path: Path, data: bytes) -> None:
    """Write an upload payload, creating the parent directory."""
    if not data:
        raise InvalidUploadError("Uploaded file is empty")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as exc:
        raise StorageIOError(f"Failed to store upload: {exc}", path=path) from exc


class EditorImageStore:
    """Stores images pasted into the post editor."""

    def __init__(
        self,
        image_dir: Path,
        url_prefix: str = "/images",
        clock: Callable[[], float] = time.time,
        rng: random.Random | None = None,
    ) -> None:
        self._image_dir = Path(image_dir)
        self._url_prefix = url_prefix.rstrip("/")
        self._clock = clock
        self._rng = rng or random.Random()

    @property
    def image_dir(self) -> Path:
        return self._image_dir

    def save_uploaded_image(self, data: bytes, original_filename: str | None) -> str:
        """Persist an editor image and return the stored file name."""
        filename = self._new_filename(original_filename)
        path = self._image_dir / filename
        write_upload(path, data)

        logger.info(
            "Editor image stored",
            filename=filename,
            original_filename=original_filename,
            size=len(data),
        )
        return filename

    def image_url(self, filename: str) -> str:
        """Public path the static-file layer serves an editor image under."""
        return f"{self._url_prefix}/editor/{filename}"

    def _new_filename(self, original_filename: str | None) -> str:
        millis = int(self._clock() * 1000)
        suffix = self._rng.randint(0, 100_000)
        return f"{millis}-{suffix}{file_extension(original_filename)}"
