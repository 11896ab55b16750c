"""Catalog document models"""

from datetime import date
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

NO_TENANT = "N/A"
ALL_PROPERTIES = "All Properties"
ARCHIVED_STATUS = "archived"

VARIANT_FIELDS = ("expiry_date", "amount", "score", "photo_count", "item_count", "uploaded_by")


class NewDocument(BaseModel):
    """Document fields supplied by the caller; the catalog assigns the id."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    name: str = Field(..., min_length=1)
    doc_type: str = Field(default="upload", alias="type")
    category: str
    property: str = ALL_PROPERTIES
    tenant: str = NO_TENANT
    file_type: str
    size: str
    upload_date: date
    status: str = Field(..., min_length=1)
    tags: Tuple[str, ...] = ()

    # At most one of these is populated, depending on the document kind.
    expiry_date: Optional[date] = None
    amount: Optional[str] = None
    score: Optional[str] = None
    photo_count: Optional[int] = None
    item_count: Optional[int] = None
    uploaded_by: Optional[str] = None

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_never_null(cls, value):
        return () if value is None else value

    @model_validator(mode="after")
    def _single_variant(self):
        populated = [name for name in VARIANT_FIELDS if getattr(self, name) is not None]
        if len(populated) > 1:
            raise ValueError(f"Only one variant field may be set, got: {', '.join(populated)}")
        return self


class Document(NewDocument):
    """A document admitted to the catalog."""

    id: int


class DocumentPatch(BaseModel):
    """Partial update applied by the catalog store."""

    name: Optional[str] = Field(default=None, min_length=1)
    status: Optional[str] = Field(default=None, min_length=1)
    tags: Optional[Tuple[str, ...]] = None
    add_tags: Tuple[str, ...] = ()

    def apply(self, document: Document) -> Document:
        """Return a copy of ``document`` with the patch applied; ``document`` itself is untouched."""
        changes = {}
        if self.name is not None:
            changes["name"] = self.name
        if self.status is not None:
            changes["status"] = self.status

        tags = list(self.tags if self.tags is not None else document.tags)
        for tag in self.add_tags:
            if tag not in tags:
                tags.append(tag)
        if tuple(tags) != document.tags:
            changes["tags"] = tuple(tags)

        if not changes:
            return document
        return document.model_copy(update=changes)
