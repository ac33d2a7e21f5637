"""Contacts API routes, including a contact's tag set."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from rolodex.api.v1.common import data_response, parse_id_list
from rolodex.core.auth import AuthContext, get_auth_context
from rolodex.core.db import get_session
from rolodex.schemas import (
    ContactCreate,
    ContactQuery,
    ContactRead,
    ContactTagsReplace,
    ContactTagToggle,
    ContactUpdate,
    SortDirection,
    SortField,
    TagSummary,
)
from rolodex.services import contacts as contact_service
from rolodex.services.contact_tags import ContactTagManager

router = APIRouter(prefix="/contacts", tags=["contacts"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_contact(
    payload: ContactCreate,
    session: AsyncSession = Depends(get_session),
    auth: AuthContext | None = Depends(get_auth_context),
) -> dict[str, ContactRead]:
    """Create a new contact."""

    contact = await contact_service.create_contact(session, auth, payload)
    return data_response(contact)


@router.get("")
async def list_contacts(
    q: str = "",
    tag_ids: list[int] = Depends(parse_id_list),
    sort: SortField = Query(SortField.NAME),
    direction: SortDirection = Query(SortDirection.ASC),
    session: AsyncSession = Depends(get_session),
    auth: AuthContext | None = Depends(get_auth_context),
) -> dict[str, list[ContactRead]]:
    """List contacts matching the search text and any of the selected tags."""

    query = ContactQuery(q=q, tag_ids=tag_ids, sort=sort, direction=direction)
    contacts = await contact_service.query_contacts(session, auth, query)
    return data_response(contacts)


@router.get("/{contact_id}")
async def get_contact(
    contact_id: int,
    session: AsyncSession = Depends(get_session),
    auth: AuthContext | None = Depends(get_auth_context),
) -> dict[str, ContactRead]:
    contact = await contact_service.read_contact(session, auth, contact_id)
    return data_response(contact)


@router.put("/{contact_id}")
async def update_contact(
    contact_id: int,
    payload: ContactUpdate,
    session: AsyncSession = Depends(get_session),
    auth: AuthContext | None = Depends(get_auth_context),
) -> dict[str, ContactRead]:
    """Update an existing contact."""

    contact = await contact_service.update_contact(session, auth, contact_id, payload)
    return data_response(contact)


@router.delete("/{contact_id}")
async def delete_contact(
    contact_id: int,
    session: AsyncSession = Depends(get_session),
    auth: AuthContext | None = Depends(get_auth_context),
) -> dict[str, dict[str, bool]]:
    """Delete the contact with its tags, interactions and reminders."""

    await contact_service.delete_contact(session, auth, contact_id)
    return data_response({"deleted": True})


@router.get("/{contact_id}/tags")
async def list_contact_tags(
    contact_id: int,
    session: AsyncSession = Depends(get_session),
    auth: AuthContext | None = Depends(get_auth_context),
) -> dict[str, list[TagSummary]]:
    contact = await contact_service.get_contact(session, auth, contact_id)
    tags = await ContactTagManager(session, auth).tags_for_contact(contact.id)
    return data_response([TagSummary.model_validate(tag) for tag in tags])


@router.put("/{contact_id}/tags")
async def replace_contact_tags(
    contact_id: int,
    payload: ContactTagsReplace,
    session: AsyncSession = Depends(get_session),
    auth: AuthContext | None = Depends(get_auth_context),
) -> dict[str, list[TagSummary]]:
    """Make the given ids the contact's complete tag set."""

    tags = await ContactTagManager(session, auth).replace(contact_id, payload.tag_ids)
    return data_response([TagSummary.model_validate(tag) for tag in tags])


@router.post("/{contact_id}/tags/{tag_id}/toggle")
async def toggle_contact_tag(
    contact_id: int,
    tag_id: int,
    session: AsyncSession = Depends(get_session),
    auth: AuthContext | None = Depends(get_auth_context),
) -> dict[str, ContactTagToggle]:
    """Add the tag if the contact lacks it, remove it otherwise."""

    manager = ContactTagManager(session, auth)
    selected = await manager.toggle(contact_id, tag_id)
    tags = await manager.tags_for_contact(contact_id)
    return data_response(
        ContactTagToggle(
            tag_id=tag_id,
            selected=selected,
            tags=[TagSummary.model_validate(tag) for tag in tags],
        )
    )
