"""Saved object models."""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ObjectIdentity(BaseModel):
    """A `(type, id)` pair identifying a saved object."""

    type: str = Field(..., min_length=1)
    id: str = Field(..., min_length=1)

    @property
    def key(self) -> tuple[str, str]:
        return (self.type, self.id)


class SavedObjectReference(BaseModel):
    """Directed edge from one saved object to another."""

    name: str = ""
    type: str = Field(..., min_length=1)
    id: str = Field(..., min_length=1)

    @property
    def key(self) -> tuple[str, str]:
        return (self.type, self.id)


class SavedObject(BaseModel):
    """Saved object entry model.

    Unknown top-level fields found in import files (for example `version`
    or `migrationVersion`) are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    type: str = Field(..., min_length=1)
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), min_length=1)
    attributes: dict[str, Any] = Field(default_factory=dict)
    references: list[SavedObjectReference] = Field(default_factory=list)
    updated_at: datetime | None = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.type, self.id)

    @property
    def title(self) -> str | None:
        title = self.attributes.get("title")
        return title if isinstance(title, str) else None

    def to_record(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible export record."""
        return self.model_dump(mode="json", exclude_none=True)


class SavedObjectCreate(BaseModel):
    """Saved object creation request body."""

    attributes: dict[str, Any] = Field(default_factory=dict)
    references: list[SavedObjectReference] = Field(default_factory=list)


class FindResult(BaseModel):
    """Page of saved objects returned by find."""

    model_config = ConfigDict(populate_by_name=True)

    page: int
    per_page: int = Field(alias="perPage")
    total: int
    saved_objects: list[SavedObject] = Field(default_factory=list)

    def to_response(self) -> dict[str, Any]:
        """Serialize to the find response body."""
        return {
            **self.model_dump(by_alias=True, exclude={"saved_objects"}),
            "saved_objects": [obj.to_record() for obj in self.saved_objects],
        }
