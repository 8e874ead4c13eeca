"""Post schema — the record persisted as one JSON document per post.

Persisted by: PostStore ({base}/posts/{id}.json)
Consumed by: PostService, OrphanImageCollector

Attribute names are snake_case; the persisted document and the
transport layer use the camelCase aliases.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Post(BaseModel):
    """A blog post.

    `id` is None until the store assigns one from the "post" sequence.
    Once assigned it never changes and is never reused.

    `content` is opaque to the store. Editors usually save a JSON blob
    here whose `images` array lists the editor images the post uses.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    id: Optional[int] = Field(default=None, gt=0, description="Store-assigned identifier")
    title: Optional[str] = Field(default=None, description="Post title")
    content: Optional[str] = Field(default=None, description="Post body, possibly a JSON blob")
    writer: Optional[str] = Field(default=None, description="Author display name")
    created_at: Optional[str] = Field(default=None, description="ISO-8601 creation time")
    updated_at: Optional[str] = Field(default=None, description="ISO-8601 last update time")
    image_filename: Optional[str] = Field(default=None, description="Attached image file name")
    image_path: Optional[str] = Field(default=None, description="Public path of the attached image")

    def to_document(self) -> str:
        """Pretty-printed JSON document as written to disk."""
        return self.model_dump_json(by_alias=True, indent=2)

    def matches(self, keyword: str) -> bool:
        """Case-insensitive substring match against title or content."""
        needle = keyword.lower()
        return any(
            value is not None and needle in value.lower()
            for value in (self.title, self.content)
        )
