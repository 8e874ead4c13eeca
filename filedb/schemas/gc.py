"""ImageGcResult — outcome of one orphan-image collection run.

`deleted_file_names` may be shorter than `orphan_image_count` when
individual deletions fail; the run never raises for those.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ImageGcResult(BaseModel):
    """Counts and deleted names from a mark-and-sweep run."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    referenced_image_count: int = Field(..., ge=0, description="Distinct names referenced by posts")
    total_image_file_count: int = Field(..., ge=0, description="Files in the editor image directory")
    orphan_image_count: int = Field(..., ge=0, description="Files no post references")
    deleted_file_names: list[str] = Field(default_factory=list, description="Names actually deleted")

    @property
    def failed_count(self) -> int:
        return self.orphan_image_count - len(self.deleted_file_names)

    def summary(self) -> dict[str, Any]:
        """Produce a summary dict for logging or API response."""
        return self.model_dump(by_alias=True)
