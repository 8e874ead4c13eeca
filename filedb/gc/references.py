"""ImageReferenceScanner — which editor images a post's content uses.

Post content is opaque text that editors usually fill with a JSON blob:

    {
      "type": "toast",
      "markdown": "...",
      "html": "...",
      "images": ["/editor/1765000000000-4821.png", "http://host/images/editor/a.jpg"]
    }

Only the `images` array counts as a reference. Anything that is not
such a blob references nothing. Truncated or garbled JSON therefore
drops real references silently, so a collection run can delete an
image that a damaged post still embeds.
"""

from __future__ import annotations

import json
from typing import Iterable

import structlog

from filedb.schemas.post import Post

logger = structlog.get_logger()


def extract_file_name(url_or_path: str | None) -> str:
    """Last `/`-separated segment of a path or URL; bare names pass through."""
    if not url_or_path:
        return ""
    trimmed = url_or_path.strip()
    return trimmed.rsplit("/", 1)[-1]


def extract_referenced_names(content: str | None) -> set[str]:
    """Image file names referenced by one content blob. Never raises."""
    if content is None or not content.strip():
        return set()

    try:
        root = json.loads(content)
    except (ValueError, RecursionError):
        return set()

    if not isinstance(root, dict):
        return set()
    images = root.get("images")
    if not isinstance(images, list):
        return set()

    names: set[str] = set()
    for entry in images:
        if not isinstance(entry, str):
            continue
        name = extract_file_name(entry)
        if name.strip():
            names.add(name)
    return names


class ImageReferenceScanner:
    """Builds the referenced-name set (the GC roots) over many posts."""

    def scan(self, posts: Iterable[Post]) -> set[str]:
        referenced: set[str] = set()
        scanned = 0
        for post in posts:
            referenced |= extract_referenced_names(post.content)
            scanned += 1

        logger.debug(
            "Image references collected",
            posts=scanned,
            referenced=len(referenced),
        )
        return referenced
