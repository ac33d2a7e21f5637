"""Value objects embedded in interaction rows and their JSON codec.

Both embedded columns are written as a versioned envelope::

    {"version": 1, "items": [...]}

Older rows may hold a bare list, or the list serialized to a JSON string.
Anything that cannot be decoded is logged and read as an empty collection so
that one bad row never breaks a listing.
"""
from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

EMBEDDED_FORMAT_VERSION = 1

logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT", bound=BaseModel)


class FileAttachment(BaseModel):
    """A stored file attached to an interaction."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    type: str
    size: int
    path: str
    url: str
    uploaded_at: datetime


class HistoricalTag(BaseModel):
    """Copy of a tag as it looked when an interaction was recorded."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    color: str


_ATTACHMENTS = TypeAdapter(list[FileAttachment])
_HISTORICAL_TAGS = TypeAdapter(list[HistoricalTag])


def encode_items(items: Sequence[BaseModel]) -> dict[str, Any]:
    """Wrap embedded values in the current envelope."""

    return {
        "version": EMBEDDED_FORMAT_VERSION,
        "items": [item.model_dump(mode="json") for item in items],
    }


def decode_attachments(raw: Any) -> list[FileAttachment]:
    return _decode(raw, _ATTACHMENTS, "file_attachments")


def decode_historical_tags(raw: Any) -> list[HistoricalTag]:
    return _decode(raw, _HISTORICAL_TAGS, "historical_tags")


def _decode(raw: Any, adapter: TypeAdapter[list[ItemT]], column: str) -> list[ItemT]:
    if raw is None:
        return []
    try:
        if isinstance(raw, (str, bytes)):
            raw = json.loads(raw)
        if isinstance(raw, dict):
            version = raw.get("version")
            if version != EMBEDDED_FORMAT_VERSION:
                raise ValueError(f"Unsupported {column} version: {version!r}")
            raw = raw.get("items")
        return adapter.validate_python(raw)
    except (ValueError, ValidationError) as exc:
        logger.warning(
            "Discarding malformed embedded value", extra={"column": column, "error": str(exc)}
        )
        return []
