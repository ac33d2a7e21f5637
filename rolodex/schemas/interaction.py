"""Pydantic schemas for interaction resources."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from rolodex.models.interaction import InteractionType
from rolodex.schemas.embedded import FileAttachment, HistoricalTag


class InteractionCreate(BaseModel):
    type: InteractionType
    date: datetime
    notes: str | None = None


class InteractionUpdate(BaseModel):
    type: InteractionType | None = None
    date: datetime | None = None
    notes: str | None = None
    remove_attachment_ids: list[str] = Field(default_factory=list)


class InteractionRead(BaseModel):
    id: int
    contact_id: int
    type: InteractionType
    date: datetime
    notes: str | None = None
    file_attachments: list[FileAttachment] = Field(default_factory=list)
    historical_tags: list[HistoricalTag] = Field(default_factory=list)
    created_at: datetime


class FailedUpload(BaseModel):
    name: str
    message: str


class InteractionResult(BaseModel):
    """An interaction write together with the per-file upload outcome."""

    interaction: InteractionRead
    uploaded: int = 0
    failed_uploads: list[FailedUpload] = Field(default_factory=list)


class SignedUrl(BaseModel):
    url: str
    expires_in: int
