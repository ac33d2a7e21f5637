"""Pydantic schemas for reminder resources."""
from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, computed_field

from rolodex.models.interaction import InteractionType

CHANNEL_OPTIONS = ("Email", "Call", "Meeting", "LinkedIn", "WhatsApp", "Twitter", "Other")

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]
Channel = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]


class ReminderCreate(BaseModel):
    contact_id: int = Field(gt=0)
    title: Title
    date: datetime
    channel: Channel = "Email"
    notes: str | None = None


class ReminderUpdate(BaseModel):
    title: Title | None = None
    date: datetime | None = None
    channel: Channel | None = None
    notes: str | None = None


class ReminderContact(BaseModel):
    """The contact a reminder is for, as shown in reminder listings."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    company: str
    position: str
    location: str
    email: str | None = None
    phone: str | None = None


class ReminderRead(BaseModel):
    id: int
    contact_id: int
    contact: ReminderContact | None = None
    title: str
    date: datetime
    channel: str
    notes: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @computed_field  # type: ignore[prop-decorator]
    @property
    def completed_at(self) -> datetime | None:
        return None if self.is_active else self.updated_at


class ReminderComplete(BaseModel):
    log_interaction: bool = False


class InteractionDraft(BaseModel):
    """Defaults for an interaction form opened from a reminder; never auto-submitted."""

    contact_id: int
    type: InteractionType
    date: datetime
    notes: str


class ReminderCompletion(BaseModel):
    reminder: ReminderRead
    interaction_draft: InteractionDraft | None = None


class CalendarLink(BaseModel):
    url: str
