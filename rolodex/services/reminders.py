"""Reminder lifecycle: active reminders can be completed exactly once."""
from __future__ import annotations

import logging
from datetime import date, datetime, time

from sqlalchemy import select
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession

from rolodex.core.auth import AuthContext, require_owner
from rolodex.core.calendar import build_calendar_url
from rolodex.core.errors import ResourceNotFoundError
from rolodex.models import Contact, InteractionType, Reminder
from rolodex.schemas import (
    CalendarLink,
    InteractionDraft,
    ReminderCompletion,
    ReminderContact,
    ReminderCreate,
    ReminderRead,
    ReminderUpdate,
)
from rolodex.services.contacts import get_contact

logger = logging.getLogger(__name__)


async def create_reminder(
    session: AsyncSession, auth: AuthContext | None, payload: ReminderCreate
) -> ReminderRead:
    owner_id = require_owner(auth)
    contact = await get_contact(session, auth, payload.contact_id)

    reminder = Reminder(owner_id=owner_id, is_active=True, **payload.model_dump())
    session.add(reminder)
    await session.commit()
    await session.refresh(reminder)
    return serialize_reminder(reminder, contact)


async def get_reminder(
    session: AsyncSession, auth: AuthContext | None, reminder_id: int
) -> Reminder:
    owner_id = require_owner(auth)
    reminder = await session.get(Reminder, reminder_id)
    if reminder is None or reminder.owner_id != owner_id:
        raise ResourceNotFoundError("Reminder not found")
    return reminder


async def list_reminders(
    session: AsyncSession,
    auth: AuthContext | None,
    *,
    contact_id: int | None = None,
    is_active: bool | None = None,
) -> list[ReminderRead]:
    """List reminders, active ones first, each group newest date first."""

    owner_id = require_owner(auth)
    stmt = (
        select(Reminder)
        .options(selectinload(Reminder.contact))
        .where(Reminder.owner_id == owner_id)
    )
    if contact_id is not None:
        stmt = stmt.where(Reminder.contact_id == contact_id)
    if is_active is not None:
        stmt = stmt.where(Reminder.is_active.is_(is_active))
    stmt = stmt.order_by(Reminder.is_active.desc(), Reminder.date.desc(), Reminder.id)

    result = await session.execute(stmt)
    return [serialize_reminder(reminder, reminder.contact) for reminder in result.scalars()]


async def update_reminder(
    session: AsyncSession,
    auth: AuthContext | None,
    reminder_id: int,
    payload: ReminderUpdate,
) -> ReminderRead:
    reminder = await get_reminder(session, auth, reminder_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is None and field != "notes":
            continue
        setattr(reminder, field, value)
    await session.commit()
    await session.refresh(reminder)
    return serialize_reminder(reminder, await get_contact(session, auth, reminder.contact_id))


async def complete_reminder(
    session: AsyncSession,
    auth: AuthContext | None,
    reminder_id: int,
    *,
    log_interaction: bool = False,
    today: date | None = None,
) -> ReminderCompletion:
    """Mark a reminder completed.

    Completing an already completed reminder changes nothing. With
    ``log_interaction`` the result carries a pre-filled interaction draft for
    the caller to confirm; nothing is recorded on its behalf.
    """

    reminder = await get_reminder(session, auth, reminder_id)
    if reminder.is_active:
        reminder.is_active = False
        await session.commit()
        await session.refresh(reminder)
        logger.info("Reminder completed", extra={"reminder_id": reminder.id})

    draft = build_interaction_draft(reminder, today) if log_interaction else None
    contact = await get_contact(session, auth, reminder.contact_id)
    return ReminderCompletion(
        reminder=serialize_reminder(reminder, contact), interaction_draft=draft
    )


async def delete_reminder(
    session: AsyncSession, auth: AuthContext | None, reminder_id: int
) -> None:
    reminder = await get_reminder(session, auth, reminder_id)
    await session.delete(reminder)
    await session.commit()


def build_interaction_draft(reminder: Reminder, today: date | None = None) -> InteractionDraft:
    """Seed an interaction form from a reminder."""

    today = today or date.today()
    try:
        interaction_type = InteractionType(reminder.channel)
    except ValueError:
        interaction_type = InteractionType.OTHER
    return InteractionDraft(
        contact_id=reminder.contact_id,
        type=interaction_type,
        date=datetime.combine(today, time.min),
        notes=f"Follow-up from reminder: {reminder.title}\n\n{reminder.notes or ''}",
    )


def calendar_link(reminder: Reminder) -> CalendarLink:
    """Build a calendar event link for the reminder without touching it."""

    details = f"Channel: {reminder.channel}"
    if reminder.notes:
        details = f"{reminder.notes}\n\n{details}"
    return CalendarLink(
        url=build_calendar_url(title=reminder.title, start=reminder.date, description=details)
    )


def serialize_reminder(reminder: Reminder, contact: Contact | None) -> ReminderRead:
    return ReminderRead(
        id=reminder.id,
        contact_id=reminder.contact_id,
        contact=ReminderContact.model_validate(contact) if contact is not None else None,
        title=reminder.title,
        date=reminder.date,
        channel=reminder.channel,
        notes=reminder.notes,
        is_active=reminder.is_active,
        created_at=reminder.created_at,
        updated_at=reminder.updated_at,
    )
