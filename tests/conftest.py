"""Shared test fixtures for FileDB tests.

Every fixture writes under pytest's tmp_path, so tests never touch a
real data or upload directory.
"""

import json
from datetime import datetime
from pathlib import Path

import pytest

from filedb.config.settings import FileDBSettings
from filedb.factory import FileDBServices, build_services
from filedb.gc.collector import OrphanImageCollector
from filedb.schemas.post import Post
from filedb.services.post_service import PostService
from filedb.storage.post_store import PostStore
from filedb.storage.sequence import SequenceGenerator


# ---------------------------------------------------------------------------
# Timestamps
# ---------------------------------------------------------------------------
SAMPLE_NOW = datetime(2026, 2, 9, 14, 30, 0)


def _editor_content(*images: str, markdown: str = "body") -> str:
    """Editor content blob with an images array."""
    return json.dumps(
        {
            "type": "toast",
            "markdown": markdown,
            "html": f"<p>{markdown}</p>",
            "images": list(images),
        }
    )


@pytest.fixture
def editor_content():
    """Builder for editor content blobs: editor_content("/editor/a.png")."""
    return _editor_content


# ---------------------------------------------------------------------------
# Settings and stores
# ---------------------------------------------------------------------------
@pytest.fixture
def settings(tmp_path: Path) -> FileDBSettings:
    return FileDBSettings(
        base_path=tmp_path / "data",
        upload_path=tmp_path / "uploads",
    )


@pytest.fixture
def sequence(settings: FileDBSettings) -> SequenceGenerator:
    return SequenceGenerator(settings.sequence_file)


@pytest.fixture
def post_store(settings: FileDBSettings, sequence: SequenceGenerator) -> PostStore:
    return PostStore(settings.posts_dir, sequence)


@pytest.fixture
def clock():
    """Mutable clock: set clock.now to move time."""

    class _Clock:
        now = SAMPLE_NOW

        def __call__(self) -> datetime:
            return self.now

    return _Clock()


@pytest.fixture
def post_service(settings: FileDBSettings, post_store: PostStore, clock) -> PostService:
    return PostService(post_store, upload_dir=settings.upload_path, now=clock)


@pytest.fixture
def image_dir(settings: FileDBSettings) -> Path:
    path = settings.editor_image_dir
    path.mkdir(parents=True)
    return path


@pytest.fixture
def collector(post_store: PostStore, settings: FileDBSettings) -> OrphanImageCollector:
    return OrphanImageCollector(post_store, settings.editor_image_dir)


@pytest.fixture
def services(settings: FileDBSettings) -> FileDBServices:
    return build_services(settings)


# ---------------------------------------------------------------------------
# Post fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def sample_post() -> Post:
    """A new post with no id yet."""
    return Post(
        title="Hello",
        content=_editor_content("/editor/a.png", markdown="first post"),
        writer="kim",
        created_at=SAMPLE_NOW.isoformat(),
        updated_at=SAMPLE_NOW.isoformat(),
    )
