"""Contact storage and the composed contact list query."""
from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rolodex.core.auth import AuthContext, require_owner
from rolodex.core.errors import ResourceNotFoundError
from rolodex.models import Contact, Tag
from rolodex.schemas import ContactCreate, ContactQuery, ContactRead, ContactUpdate, TagSummary
from rolodex.schemas.contact import REQUIRED_FIELDS
from rolodex.services.contact_filters import apply_contact_query
from rolodex.services.contact_tags import ContactTagManager

logger = logging.getLogger(__name__)


async def create_contact(
    session: AsyncSession, auth: AuthContext | None, payload: ContactCreate
) -> ContactRead:
    """Create a contact and, when given, attach its initial tags."""

    owner_id = require_owner(auth)
    manager = ContactTagManager(session, auth)

    contact = Contact(owner_id=owner_id, **payload.model_dump(exclude={"tag_ids"}))
    session.add(contact)
    await session.flush()
    if payload.tag_ids:
        await manager.stage_replace(contact.id, payload.tag_ids)
    await session.commit()
    await session.refresh(contact)

    logger.info("Contact created", extra={"contact_id": contact.id})
    return _serialize_contact(contact, await manager.tags_for_contact(contact.id))


async def get_contact(
    session: AsyncSession, auth: AuthContext | None, contact_id: int
) -> Contact:
    owner_id = require_owner(auth)
    contact = await session.get(Contact, contact_id)
    if contact is None or contact.owner_id != owner_id:
        raise ResourceNotFoundError("Contact not found")
    return contact


async def read_contact(
    session: AsyncSession, auth: AuthContext | None, contact_id: int
) -> ContactRead:
    contact = await get_contact(session, auth, contact_id)
    tags = await ContactTagManager(session, auth).tags_for_contact(contact.id)
    return _serialize_contact(contact, tags)


async def update_contact(
    session: AsyncSession,
    auth: AuthContext | None,
    contact_id: int,
    payload: ContactUpdate,
) -> ContactRead:
    """Update contact fields; a ``tag_ids`` list replaces the whole tag set."""

    contact = await get_contact(session, auth, contact_id)
    manager = ContactTagManager(session, auth)

    updates = payload.model_dump(exclude_unset=True, exclude={"tag_ids"})
    for field, value in updates.items():
        if value is None and field in REQUIRED_FIELDS:
            continue
        setattr(contact, field, value)
    if payload.tag_ids is not None:
        await manager.stage_replace(contact.id, payload.tag_ids)

    await session.commit()
    await session.refresh(contact)
    return _serialize_contact(contact, await manager.tags_for_contact(contact.id))


async def delete_contact(
    session: AsyncSession, auth: AuthContext | None, contact_id: int
) -> None:
    contact = await get_contact(session, auth, contact_id)
    await session.delete(contact)
    await session.commit()
    logger.info("Contact deleted", extra={"contact_id": contact_id})


async def list_contacts(session: AsyncSession, auth: AuthContext | None) -> list[Contact]:
    owner_id = require_owner(auth)
    result = await session.execute(
        select(Contact).where(Contact.owner_id == owner_id).order_by(Contact.id)
    )
    return list(result.scalars())


async def query_contacts(
    session: AsyncSession, auth: AuthContext | None, query: ContactQuery
) -> list[ContactRead]:
    """Search, tag-filter and sort the owner's contacts."""

    manager = ContactTagManager(session, auth)
    contacts = await list_contacts(session, auth)

    tagged_contact_ids: set[int] = set()
    if query.tag_ids:
        tagged_contact_ids = await manager.contact_ids_for_tags(query.tag_ids)

    ordered = apply_contact_query(contacts, query, tagged_contact_ids)
    tags = await manager.tags_by_contact([contact.id for contact in ordered])
    return [_serialize_contact(contact, tags.get(contact.id, [])) for contact in ordered]


def _serialize_contact(contact: Contact, tags: Sequence[Tag]) -> ContactRead:
    return ContactRead(
        id=contact.id,
        first_name=contact.first_name,
        last_name=contact.last_name,
        email=contact.email,
        phone=contact.phone,
        company=contact.company,
        position=contact.position,
        location=contact.location,
        url=contact.url,
        notes=contact.notes,
        connected_on=contact.connected_on,
        created_at=contact.created_at,
        updated_at=contact.updated_at,
        tags=[TagSummary.model_validate(tag) for tag in tags],
    )
