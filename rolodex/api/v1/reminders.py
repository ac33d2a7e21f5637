"""Reminder API routes."""
from __future__ import annotations

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from rolodex.api.v1.common import data_response
from rolodex.core.auth import AuthContext, get_auth_context, require_owner
from rolodex.core.db import get_session
from rolodex.schemas import (
    CalendarLink,
    InteractionDraft,
    ReminderComplete,
    ReminderCompletion,
    ReminderCreate,
    ReminderRead,
    ReminderUpdate,
)
from rolodex.schemas.reminder import CHANNEL_OPTIONS
from rolodex.services import reminders as reminder_service

router = APIRouter(prefix="/reminders", tags=["reminders"])


@router.get("/channels")
async def reminder_channels(
    auth: AuthContext | None = Depends(get_auth_context),
) -> dict[str, list[str]]:
    """Channels offered when scheduling a reminder."""

    require_owner(auth)
    return data_response(list(CHANNEL_OPTIONS))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_reminder(
    payload: ReminderCreate,
    session: AsyncSession = Depends(get_session),
    auth: AuthContext | None = Depends(get_auth_context),
) -> dict[str, ReminderRead]:
    reminder = await reminder_service.create_reminder(session, auth, payload)
    return data_response(reminder)


@router.get("")
async def list_reminders(
    contact_id: int | None = None,
    is_active: bool | None = None,
    session: AsyncSession = Depends(get_session),
    auth: AuthContext | None = Depends(get_auth_context),
) -> dict[str, list[ReminderRead]]:
    """List reminders, active first, optionally for one contact."""

    reminders = await reminder_service.list_reminders(
        session, auth, contact_id=contact_id, is_active=is_active
    )
    return data_response(reminders)


@router.put("/{reminder_id}")
async def update_reminder(
    reminder_id: int,
    payload: ReminderUpdate,
    session: AsyncSession = Depends(get_session),
    auth: AuthContext | None = Depends(get_auth_context),
) -> dict[str, ReminderRead]:
    reminder = await reminder_service.update_reminder(session, auth, reminder_id, payload)
    return data_response(reminder)


@router.delete("/{reminder_id}")
async def delete_reminder(
    reminder_id: int,
    session: AsyncSession = Depends(get_session),
    auth: AuthContext | None = Depends(get_auth_context),
) -> dict[str, dict[str, bool]]:
    await reminder_service.delete_reminder(session, auth, reminder_id)
    return data_response({"deleted": True})


@router.post("/{reminder_id}/complete")
async def complete_reminder(
    reminder_id: int,
    payload: ReminderComplete | None = Body(None),
    session: AsyncSession = Depends(get_session),
    auth: AuthContext | None = Depends(get_auth_context),
) -> dict[str, ReminderCompletion]:
    """Mark the reminder done, optionally returning an interaction draft."""

    options = payload or ReminderComplete()
    completion = await reminder_service.complete_reminder(
        session, auth, reminder_id, log_interaction=options.log_interaction
    )
    return data_response(completion)


@router.get("/{reminder_id}/interaction-draft")
async def interaction_draft(
    reminder_id: int,
    session: AsyncSession = Depends(get_session),
    auth: AuthContext | None = Depends(get_auth_context),
) -> dict[str, InteractionDraft]:
    reminder = await reminder_service.get_reminder(session, auth, reminder_id)
    return data_response(reminder_service.build_interaction_draft(reminder))


@router.get("/{reminder_id}/calendar-link")
async def calendar_link(
    reminder_id: int,
    session: AsyncSession = Depends(get_session),
    auth: AuthContext | None = Depends(get_auth_context),
) -> dict[str, CalendarLink]:
    """Build an add-to-calendar link; the reminder itself is unchanged."""

    reminder = await reminder_service.get_reminder(session, auth, reminder_id)
    return data_response(reminder_service.calendar_link(reminder))
