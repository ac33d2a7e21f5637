"""Utilities for importing contacts from CSV payloads."""
from __future__ import annotations

import csv
import io
import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Sequence

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from rolodex.core.auth import AuthContext, require_owner
from rolodex.core.errors import ImportFormatError
from rolodex.models import Contact
from rolodex.schemas import ContactCreate, ImportPreview, ImportSummary, RowErrorRead
from rolodex.schemas.contact import OPTIONAL_TEXT_FIELDS

IMPORT_COLUMNS = (
    "first_name",
    "last_name",
    "email",
    "phone",
    "company",
    "position",
    "location",
    "url",
    "connected_on",
    "notes",
)
REQUIRED_COLUMNS = ("first_name", "last_name", "company", "position", "location")
ISO_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")

CSV_TEMPLATE = (
    ",".join(IMPORT_COLUMNS)
    + "\n"
    + 'John,Doe,john@example.com,555-123-4567,Acme Inc,Product Manager,"Austin, TX",'
    + "https://example.com/john,2024-01-15,Met at Tech Conference\n"
    + "Jane,Smith,jane@example.com,555-987-6543,XYZ Corp,CEO,London,,,Introduced by Mike\n"
)

logger = logging.getLogger(__name__)


class ImportRowError(Exception):
    """Raised when a row cannot be turned into a contact."""


@dataclass
class ParsedRow:
    row_index: int
    original: dict[str, Any]
    contact: ContactCreate


@dataclass
class RowError:
    row_index: int
    message: str
    original: dict[str, Any]


class ContactImportProcessor:
    """Parse a contacts CSV and insert the valid rows in batches."""

    def __init__(
        self,
        *,
        session: AsyncSession,
        auth: AuthContext | None,
        batch_size: int = 20,
        today: date | None = None,
    ) -> None:
        self.session = session
        self.owner_id = require_owner(auth)
        self.batch_size = batch_size
        self.today = today or date.today()

    def parse(self, file_bytes: bytes) -> tuple[list[ParsedRow], list[RowError]]:
        """Split the file into valid rows and per-row errors."""

        reader = self._build_reader(file_bytes)
        parsed_rows: list[ParsedRow] = []
        errors: list[RowError] = []

        for row_number, raw_row in enumerate(reader, start=1):
            original = {
                column: raw_row.get(column) for column in reader.fieldnames or () if column
            }
            try:
                contact = self._parse_row(original)
            except ImportRowError as exc:
                logger.info(
                    "Skipping invalid import row", extra={"row": row_number, "reason": str(exc)}
                )
                errors.append(RowError(row_number, str(exc), original))
                continue
            parsed_rows.append(ParsedRow(row_number, original, contact))

        return parsed_rows, errors

    async def preview(self, file_bytes: bytes) -> ImportPreview:
        parsed_rows, errors = self.parse(file_bytes)
        return ImportPreview(
            total=len(parsed_rows) + len(errors),
            valid=len(parsed_rows),
            invalid=len(errors),
            errors=_error_payload(errors),
            sample=[
                {"row_index": row.row_index, "parsed": row.contact.model_dump(mode="json")}
                for row in parsed_rows[:3]
            ],
        )

    async def run(self, file_bytes: bytes) -> ImportSummary:
        """Insert every valid row; each batch succeeds or fails on its own."""

        parsed_rows, errors = self.parse(file_bytes)
        created = 0
        failed = 0

        for start in range(0, len(parsed_rows), self.batch_size):
            batch = parsed_rows[start : start + self.batch_size]
            try:
                await self._insert_batch(batch)
            except SQLAlchemyError:
                await self.session.rollback()
                failed += len(batch)
                logger.exception(
                    "Failed to insert import batch",
                    extra={"first_row": batch[0].row_index, "rows": len(batch)},
                )
                continue
            created += len(batch)

        logger.info(
            "Contact import finished",
            extra={"created_contacts": created, "skipped": len(errors), "failed": failed},
        )
        return ImportSummary(
            total=len(parsed_rows) + len(errors),
            created=created,
            skipped=len(errors),
            failed=failed,
            errors=_error_payload(errors),
        )

    async def _insert_batch(self, batch: Sequence[ParsedRow]) -> None:
        self.session.add_all(
            Contact(owner_id=self.owner_id, **row.contact.model_dump(exclude={"tag_ids"}))
            for row in batch
        )
        await self.session.commit()

    def _parse_row(self, original: dict[str, Any]) -> ContactCreate:
        for column in REQUIRED_COLUMNS:
            if not self._clean_optional(original.get(column)):
                raise ImportRowError(f"{column} is required")

        payload: dict[str, Any] = {
            column: self._clean_optional(original.get(column))
            for column in IMPORT_COLUMNS
            if column != "connected_on"
        }
        payload["connected_on"] = self._parse_date(original.get("connected_on"))

        try:
            return ContactCreate.model_validate(payload)
        except ValidationError as exc:
            rejected = {str(error["loc"][0]) for error in exc.errors() if error.get("loc")}
            if not rejected or not rejected <= set(OPTIONAL_TEXT_FIELDS):
                raise ImportRowError(_describe(exc)) from exc

        # Optional values that fail validation are dropped, the row is kept.
        logger.info("Dropping invalid optional import values", extra={"fields": sorted(rejected)})
        for field in rejected:
            payload[field] = None
        try:
            return ContactCreate.model_validate(payload)
        except ValidationError as exc:
            raise ImportRowError(_describe(exc)) from exc

    def _build_reader(self, file_bytes: bytes) -> csv.DictReader:
        try:
            text = file_bytes.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ImportFormatError("Uploaded file must be UTF-8 encoded") from exc

        reader = csv.DictReader(io.StringIO(text))
        if reader.fieldnames is None:
            raise ImportFormatError("CSV file must include a header row")
        reader.fieldnames = [column.strip().lower() for column in reader.fieldnames]

        missing = [column for column in REQUIRED_COLUMNS if column not in reader.fieldnames]
        if missing:
            raise ImportFormatError(f"Missing required columns: {', '.join(missing)}")
        return reader

    def _parse_date(self, value: Any) -> date:
        cleaned = self._clean_optional(value)
        if cleaned and ISO_DATE_PATTERN.fullmatch(cleaned):
            try:
                return date.fromisoformat(cleaned)
            except ValueError:
                pass
        return self.today

    def _clean_optional(self, value: Any) -> str | None:
        if value is None:
            return None
        cleaned = str(value).strip()
        return cleaned or None


def _error_payload(errors: Sequence[RowError]) -> list[RowErrorRead]:
    return [RowErrorRead(row=error.row_index, message=error.message) for error in errors]


def _describe(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg')}"
