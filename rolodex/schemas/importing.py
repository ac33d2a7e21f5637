"""Pydantic schemas for CSV import reports."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class RowErrorRead(BaseModel):
    row: int
    message: str


class ImportSummary(BaseModel):
    total: int
    created: int
    skipped: int
    failed: int
    errors: list[RowErrorRead] = Field(default_factory=list)


class ImportPreview(BaseModel):
    total: int
    valid: int
    invalid: int
    errors: list[RowErrorRead] = Field(default_factory=list)
    sample: list[dict[str, Any]] = Field(default_factory=list)
