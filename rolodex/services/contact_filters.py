"""Search, tag filtering and ordering of contact lists.

Everything here works on already-loaded contacts. Tag membership is passed in
as a set of contact ids because it comes from a separate query against the
join table.
"""
from __future__ import annotations

from collections.abc import Collection, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol, TypeVar

from rolodex.schemas import ContactQuery, SortDirection, SortField

SEARCHABLE_FIELDS = ("email", "company", "position", "location")
TIMESTAMP_FIELDS = frozenset({SortField.CREATED_AT, SortField.UPDATED_AT})


class ContactLike(Protocol):
    id: int
    first_name: str
    last_name: str
    email: str | None
    company: str | None
    position: str | None
    location: str | None
    created_at: datetime
    updated_at: datetime


ContactT = TypeVar("ContactT", bound=ContactLike)


@dataclass(frozen=True)
class SortState:
    """Current ordering of a contact table."""

    field: SortField = SortField.NAME
    direction: SortDirection = SortDirection.ASC

    def toggle(self, field: SortField) -> "SortState":
        """Flip the direction for the same column, start ascending for a new one."""

        if field == self.field:
            flipped = SortDirection.DESC if self.direction == SortDirection.ASC else SortDirection.ASC
            return SortState(field, flipped)
        return SortState(field, SortDirection.ASC)


def matches_text(contact: ContactLike, query: str) -> bool:
    needle = query.strip().lower()
    if not needle:
        return True
    full_name = f"{contact.first_name} {contact.last_name}".lower()
    if needle in full_name:
        return True
    for field in SEARCHABLE_FIELDS:
        value = getattr(contact, field, None)
        if value and needle in value.lower():
            return True
    return False


def filter_by_text(contacts: Iterable[ContactT], query: str) -> list[ContactT]:
    return [contact for contact in contacts if matches_text(contact, query)]


def filter_by_tags(
    contacts: Iterable[ContactT],
    selected_tag_ids: Collection[int],
    tagged_contact_ids: Collection[int],
) -> list[ContactT]:
    """Keep contacts carrying any selected tag; no selection keeps everyone.

    ``tagged_contact_ids`` must hold the ids of contacts that have at least one
    of ``selected_tag_ids``.
    """

    if not selected_tag_ids:
        return list(contacts)
    return [contact for contact in contacts if contact.id in tagged_contact_ids]


def sort_key(contact: ContactLike, field: SortField) -> Any:
    if field == SortField.NAME:
        return f"{contact.first_name} {contact.last_name}".lower()
    value = getattr(contact, field.value, None)
    if field in TIMESTAMP_FIELDS:
        return value.timestamp() if value is not None else 0.0
    return (value or "").lower()


def sort_contacts(
    contacts: Iterable[ContactT],
    field: SortField = SortField.NAME,
    direction: SortDirection = SortDirection.ASC,
) -> list[ContactT]:
    """Stable sort; equal keys keep their incoming order in both directions."""

    return sorted(
        contacts,
        key=lambda contact: sort_key(contact, field),
        reverse=direction == SortDirection.DESC,
    )


def apply_contact_query(
    contacts: Sequence[ContactT],
    query: ContactQuery,
    tagged_contact_ids: Collection[int] = (),
) -> list[ContactT]:
    """Text filter, then tag filter, then sort."""

    matched = filter_by_text(contacts, query.q)
    matched = filter_by_tags(matched, query.tag_ids, tagged_contact_ids)
    return sort_contacts(matched, query.sort, query.direction)
