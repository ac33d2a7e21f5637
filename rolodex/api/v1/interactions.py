"""Interaction API routes.

Interactions are written with multipart forms so attachments travel with the
record fields.
"""
from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from rolodex.api.v1.common import data_response
from rolodex.core.auth import AuthContext, get_auth_context
from rolodex.core.config import Settings, get_settings
from rolodex.core.db import get_session
from rolodex.core.storage import ObjectStorage, get_storage
from rolodex.models import InteractionType
from rolodex.schemas import (
    InteractionCreate,
    InteractionRead,
    InteractionResult,
    InteractionUpdate,
    SignedUrl,
)
from rolodex.services import interactions as interaction_service
from rolodex.services.interactions import IncomingFile

router = APIRouter(tags=["interactions"])


@router.post("/contacts/{contact_id}/interactions", status_code=status.HTTP_201_CREATED)
async def create_interaction(
    contact_id: int,
    type: InteractionType = Form(...),
    date: datetime = Form(...),
    notes: str | None = Form(None),
    files: list[UploadFile] | None = File(None),
    session: AsyncSession = Depends(get_session),
    storage: ObjectStorage = Depends(get_storage),
    auth: AuthContext | None = Depends(get_auth_context),
) -> dict[str, InteractionResult]:
    """Log an interaction; failed attachment uploads are reported, not fatal."""

    payload = InteractionCreate(type=type, date=date, notes=notes)
    result = await interaction_service.create_interaction(
        session, storage, auth, contact_id, payload, await _read_files(files)
    )
    return data_response(result)


@router.get("/contacts/{contact_id}/interactions")
async def list_interactions(
    contact_id: int,
    session: AsyncSession = Depends(get_session),
    auth: AuthContext | None = Depends(get_auth_context),
) -> dict[str, list[InteractionRead]]:
    interactions = await interaction_service.list_interactions(session, auth, contact_id)
    return data_response(interactions)


@router.put("/interactions/{interaction_id}")
async def update_interaction(
    interaction_id: int,
    type: InteractionType | None = Form(None),
    date: datetime | None = Form(None),
    notes: str | None = Form(None),
    remove_attachment_ids: list[str] = Form([]),
    files: list[UploadFile] | None = File(None),
    session: AsyncSession = Depends(get_session),
    storage: ObjectStorage = Depends(get_storage),
    auth: AuthContext | None = Depends(get_auth_context),
) -> dict[str, InteractionResult]:
    """Edit an interaction; its tag snapshot is left as recorded."""

    fields = {"type": type, "date": date, "notes": notes}
    payload = InteractionUpdate(
        remove_attachment_ids=remove_attachment_ids,
        **{key: value for key, value in fields.items() if value is not None},
    )
    result = await interaction_service.update_interaction(
        session, storage, auth, interaction_id, payload, await _read_files(files)
    )
    return data_response(result)


@router.delete("/interactions/{interaction_id}")
async def delete_interaction(
    interaction_id: int,
    session: AsyncSession = Depends(get_session),
    storage: ObjectStorage = Depends(get_storage),
    auth: AuthContext | None = Depends(get_auth_context),
) -> dict[str, dict[str, bool]]:
    await interaction_service.delete_interaction(session, storage, auth, interaction_id)
    return data_response({"deleted": True})


@router.get("/interactions/{interaction_id}/attachments/{attachment_id}/url")
async def attachment_url(
    interaction_id: int,
    attachment_id: str,
    session: AsyncSession = Depends(get_session),
    storage: ObjectStorage = Depends(get_storage),
    auth: AuthContext | None = Depends(get_auth_context),
    settings: Settings = Depends(get_settings),
) -> dict[str, SignedUrl]:
    """Return a short-lived download link for one attachment."""

    signed = await interaction_service.attachment_url(
        session,
        storage,
        auth,
        interaction_id,
        attachment_id,
        settings.signed_url_ttl_seconds,
    )
    return data_response(signed)


async def _read_files(files: list[UploadFile] | None) -> list[IncomingFile]:
    incoming: list[IncomingFile] = []
    for upload in files or []:
        incoming.append(
            IncomingFile(
                name=upload.filename or "attachment",
                content_type=upload.content_type,
                data=await upload.read(),
            )
        )
    return incoming
