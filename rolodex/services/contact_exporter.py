"""CSV export of contacts in the same layout the importer accepts."""
from __future__ import annotations

import csv
import io
from collections.abc import Sequence
from datetime import date
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from rolodex.core.auth import AuthContext
from rolodex.schemas import ContactQuery, ContactRead
from rolodex.services.contact_importer import IMPORT_COLUMNS
from rolodex.services.contacts import query_contacts

EXPORT_COLUMNS = [*IMPORT_COLUMNS, "tags"]


async def export_contacts_csv(
    session: AsyncSession,
    auth: AuthContext | None,
    tag_ids: Sequence[int] = (),
) -> str:
    """Render the owner's contacts, optionally limited to any of ``tag_ids``."""

    contacts = await query_contacts(session, auth, ContactQuery(tag_ids=list(tag_ids)))
    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=EXPORT_COLUMNS)
    writer.writeheader()
    for contact in contacts:
        writer.writerow(_serialize_contact_row(contact))
    return output.getvalue()


def _serialize_contact_row(contact: ContactRead) -> dict[str, Any]:
    row: dict[str, Any] = {}
    for column in IMPORT_COLUMNS:
        value = getattr(contact, column)
        if isinstance(value, date):
            value = value.isoformat()
        row[column] = "" if value is None else value
    row["tags"] = ";".join(tag.name for tag in contact.tags)
    return row
