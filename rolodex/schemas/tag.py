"""Pydantic schemas for tag resources."""
from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, computed_field

from rolodex.models.tag import DEFAULT_TAG_COLOR

HEX_COLOR_PATTERN = r"^#[0-9a-fA-F]{6}$"

TagName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]
HexColor = Annotated[str, Field(pattern=HEX_COLOR_PATTERN)]


def contrast_color(hex_color: str) -> str:
    """Pick black or white text for a tag background by perceived brightness."""

    value = hex_color.lstrip("#")
    red = int(value[0:2], 16)
    green = int(value[2:4], 16)
    blue = int(value[4:6], 16)
    luminance = (0.299 * red + 0.587 * green + 0.114 * blue) / 255
    return "#000000" if luminance > 0.5 else "#ffffff"


class TagCreate(BaseModel):
    name: TagName
    color: HexColor = DEFAULT_TAG_COLOR


class TagUpdate(BaseModel):
    name: TagName | None = None
    color: HexColor | None = None


class TagSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    color: str

    @computed_field  # type: ignore[prop-decorator]
    @property
    def text_color(self) -> str:
        return contrast_color(self.color)


class TagRead(TagSummary):
    created_at: datetime
    contact_count: int = 0


class TagDeletion(BaseModel):
    deleted: bool = True
    tag: TagSummary
    affected_contacts: int
    message: str


class ContactTagsReplace(BaseModel):
    tag_ids: list[Annotated[int, Field(gt=0)]] = Field(default_factory=list)


class ContactTagToggle(BaseModel):
    tag_id: int
    selected: bool
    tags: list[TagSummary]
