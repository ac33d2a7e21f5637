"""Pydantic schemas for contact resources."""
from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints, field_validator

from rolodex.schemas.tag import TagSummary

RequiredText = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=120)
]
PhoneNumber = Annotated[
    str, Field(min_length=7, max_length=32, pattern=r"^[+0-9().\- ]+$")
]
TagId = Annotated[int, Field(gt=0)]

REQUIRED_FIELDS = ("first_name", "last_name", "company", "position", "location")
OPTIONAL_TEXT_FIELDS = ("email", "phone", "url", "notes")


class ContactBase(BaseModel):
    email: EmailStr | None = None
    phone: PhoneNumber | None = None
    url: Annotated[str, Field(max_length=500)] | None = None
    notes: str | None = None
    connected_on: date | None = None

    @field_validator(*OPTIONAL_TEXT_FIELDS, mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str):
            cleaned = value.strip()
            return cleaned or None
        return value


class ContactCreate(ContactBase):
    first_name: RequiredText
    last_name: RequiredText
    company: RequiredText
    position: RequiredText
    location: RequiredText
    tag_ids: list[TagId] | None = None


class ContactUpdate(ContactBase):
    first_name: RequiredText | None = None
    last_name: RequiredText | None = None
    company: RequiredText | None = None
    position: RequiredText | None = None
    location: RequiredText | None = None
    tag_ids: list[TagId] | None = None


class ContactRead(ContactBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    company: str
    position: str
    location: str
    created_at: datetime
    updated_at: datetime
    tags: list[TagSummary] = Field(default_factory=list)


class SortField(str, Enum):
    """Columns the contact list can be ordered by."""

    NAME = "name"
    COMPANY = "company"
    POSITION = "position"
    LOCATION = "location"
    EMAIL = "email"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class ContactQuery(BaseModel):
    """Free-text search, tag selection and ordering for the contact list."""

    q: str = ""
    tag_ids: list[int] = Field(default_factory=list)
    sort: SortField = SortField.NAME
    direction: SortDirection = SortDirection.ASC
