"""Pydantic schemas for the contact relationship manager."""

from .contact import (
    ContactCreate,
    ContactQuery,
    ContactRead,
    ContactUpdate,
    SortDirection,
    SortField,
)
from .embedded import FileAttachment, HistoricalTag
from .importing import ImportPreview, ImportSummary, RowErrorRead
from .interaction import (
    FailedUpload,
    InteractionCreate,
    InteractionRead,
    InteractionResult,
    InteractionUpdate,
    SignedUrl,
)
from .reminder import (
    CalendarLink,
    InteractionDraft,
    ReminderComplete,
    ReminderCompletion,
    ReminderContact,
    ReminderCreate,
    ReminderRead,
    ReminderUpdate,
)
from .tag import (
    ContactTagsReplace,
    ContactTagToggle,
    TagCreate,
    TagDeletion,
    TagRead,
    TagSummary,
    TagUpdate,
)

__all__ = [
    "CalendarLink",
    "ContactCreate",
    "ContactQuery",
    "ContactRead",
    "ContactTagToggle",
    "ContactTagsReplace",
    "ContactUpdate",
    "FailedUpload",
    "FileAttachment",
    "HistoricalTag",
    "ImportPreview",
    "ImportSummary",
    "InteractionCreate",
    "InteractionDraft",
    "InteractionRead",
    "InteractionResult",
    "InteractionUpdate",
    "ReminderComplete",
    "ReminderCompletion",
    "ReminderContact",
    "ReminderCreate",
    "ReminderRead",
    "ReminderUpdate",
    "RowErrorRead",
    "SignedUrl",
    "SortDirection",
    "SortField",
    "TagCreate",
    "TagDeletion",
    "TagRead",
    "TagSummary",
    "TagUpdate",
]
