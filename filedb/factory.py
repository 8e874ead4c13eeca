"""Service factory — wires stores and services from settings.

Each component is constructed once and handed to its dependents; there
are no module-level singletons.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from filedb.config.settings import FileDBSettings
from filedb.gc.collector import OrphanImageCollector
from filedb.services.post_service import PostService
from filedb.services.uploads import EditorImageStore
from filedb.storage.post_store import PostStore
from filedb.storage.sequence import SequenceGenerator

logger = structlog.get_logger()


@dataclass(frozen=True)
class FileDBServices:
    """Everything a transport layer needs to serve posts and images."""

    settings: FileDBSettings
    sequence: SequenceGenerator
    post_store: PostStore
    posts: PostService
    editor_images: EditorImageStore
    image_collector: OrphanImageCollector


def build_services(settings: FileDBSettings) -> FileDBServices:
    """Construct the full component graph for one process."""
    sequence = SequenceGenerator(settings.sequence_file)
    post_store = PostStore(settings.posts_dir, sequence)

    services = FileDBServices(
        settings=settings,
        sequence=sequence,
        post_store=post_store,
        posts=PostService(
            post_store,
            upload_dir=settings.upload_path,
            image_url_prefix=settings.image_url_prefix,
        ),
        editor_images=EditorImageStore(
            settings.editor_image_dir,
            url_prefix=settings.image_url_prefix,
        ),
        image_collector=OrphanImageCollector(post_store, settings.editor_image_dir),
    )

    logger.debug(
        "Services built",
        base_path=str(settings.base_path),
        upload_path=str(settings.upload_path),
    )
    return services
