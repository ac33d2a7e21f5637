"""Interaction logging with attachments and a historical tag snapshot.

When an interaction is created, the contact's tags at that moment are copied
into the record. The copy is never recomputed: later edits to the interaction,
to the tags or to the contact's tag set leave it as it was.

Attachments are uploaded one after another before the record is written. A
failed upload is logged and skipped; the interaction is still saved with the
files that did make it. Objects belonging to removed attachments are deleted
only after the record change is committed, and a failure there is logged
rather than reported as a failed update.
"""
from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import PurePosixPath

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rolodex.core.auth import AuthContext, require_owner
from rolodex.core.errors import ResourceNotFoundError, StorageError
from rolodex.core.storage import ObjectStorage
from rolodex.models import Interaction
from rolodex.schemas import (
    FailedUpload,
    FileAttachment,
    HistoricalTag,
    InteractionCreate,
    InteractionRead,
    InteractionResult,
    InteractionUpdate,
    SignedUrl,
)
from rolodex.schemas.embedded import decode_attachments, decode_historical_tags, encode_items
from rolodex.services.contact_tags import ContactTagManager
from rolodex.services.contacts import get_contact

DEFAULT_CONTENT_TYPE = "application/octet-stream"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IncomingFile:
    """A file received with an interaction form."""

    name: str
    content_type: str | None
    data: bytes


async def snapshot_contact_tags(
    session: AsyncSession, auth: AuthContext | None, contact_id: int
) -> list[HistoricalTag]:
    """Copy the contact's current tags into detached value objects."""

    tags = await ContactTagManager(session, auth).tags_for_contact(contact_id)
    return [HistoricalTag(id=tag.id, name=tag.name, color=tag.color) for tag in tags]


async def upload_attachments(
    storage: ObjectStorage,
    owner_id: str,
    contact_id: int,
    files: Iterable[IncomingFile],
) -> tuple[list[FileAttachment], list[FailedUpload]]:
    """Upload files sequentially, collecting successes and failures separately."""

    attachments: list[FileAttachment] = []
    failures: list[FailedUpload] = []
    for incoming in files:
        attachment_id = uuid.uuid4().hex
        file_name = PurePosixPath(incoming.name or "attachment").name or "attachment"
        path = f"{owner_id}/{contact_id}/{attachment_id}-{file_name}"
        content_type = incoming.content_type or DEFAULT_CONTENT_TYPE
        try:
            stored = await storage.upload(incoming.data, path, content_type)
        except StorageError as exc:
            logger.warning(
                "Attachment upload failed, skipping",
                extra={"attachment_id": attachment_id, "file_name": file_name},
            )
            failures.append(FailedUpload(name=file_name, message=exc.message))
            continue

        attachments.append(
            FileAttachment(
                id=attachment_id,
                name=file_name,
                type=stored.content_type,
                size=stored.size,
                path=stored.path,
                url=storage.public_url(stored.path),
                uploaded_at=datetime.now(UTC),
            )
        )
        logger.info(
            "Attachment uploaded",
            extra={"attachment_id": attachment_id, "size": stored.size},
        )
    return attachments, failures


async def create_interaction(
    session: AsyncSession,
    storage: ObjectStorage,
    auth: AuthContext | None,
    contact_id: int,
    payload: InteractionCreate,
    files: Sequence[IncomingFile] = (),
) -> InteractionResult:
    """Record an interaction with the contact's current tags embedded."""

    owner_id = require_owner(auth)
    contact = await get_contact(session, auth, contact_id)

    attachments, failures = await upload_attachments(storage, owner_id, contact.id, files)
    historical_tags = await snapshot_contact_tags(session, auth, contact.id)

    interaction = Interaction(
        contact_id=contact.id,
        owner_id=owner_id,
        type=payload.type,
        date=payload.date,
        notes=payload.notes,
        file_attachments=encode_items(attachments),
        historical_tags=encode_items(historical_tags),
    )
    session.add(interaction)
    await session.commit()
    await session.refresh(interaction)

    logger.info(
        "Interaction created",
        extra={
            "interaction_id": interaction.id,
            "contact_id": contact.id,
            "historical_tags": len(historical_tags),
        },
    )
    return InteractionResult(
        interaction=serialize_interaction(interaction),
        uploaded=len(attachments),
        failed_uploads=failures,
    )


async def get_interaction(
    session: AsyncSession, auth: AuthContext | None, interaction_id: int
) -> Interaction:
    owner_id = require_owner(auth)
    interaction = await session.get(Interaction, interaction_id)
    if interaction is None or interaction.owner_id != owner_id:
        raise ResourceNotFoundError("Interaction not found")
    return interaction


async def list_interactions(
    session: AsyncSession, auth: AuthContext | None, contact_id: int
) -> list[InteractionRead]:
    """Return a contact's interactions, most recent first."""

    contact = await get_contact(session, auth, contact_id)
    result = await session.execute(
        select(Interaction)
        .where(Interaction.contact_id == contact.id)
        .order_by(Interaction.date.desc(), Interaction.id.desc())
    )
    return [serialize_interaction(interaction) for interaction in result.scalars()]


async def update_interaction(
    session: AsyncSession,
    storage: ObjectStorage,
    auth: AuthContext | None,
    interaction_id: int,
    payload: InteractionUpdate,
    files: Sequence[IncomingFile] = (),
) -> InteractionResult:
    """Edit type, date, notes and attachments; the tag snapshot is carried through."""

    owner_id = require_owner(auth)
    interaction = await get_interaction(session, auth, interaction_id)

    existing = decode_attachments(interaction.file_attachments)
    remove_ids = set(payload.remove_attachment_ids)
    kept = [attachment for attachment in existing if attachment.id not in remove_ids]
    dropped = [attachment for attachment in existing if attachment.id in remove_ids]

    added, failures = await upload_attachments(
        storage, owner_id, interaction.contact_id, files
    )

    updates = payload.model_dump(exclude_unset=True, exclude={"remove_attachment_ids"})
    for field, value in updates.items():
        if value is None and field in {"type", "date"}:
            continue
        setattr(interaction, field, value)
    if dropped or added:
        interaction.file_attachments = encode_items([*kept, *added])

    await session.commit()
    await session.refresh(interaction)

    await remove_stored_objects(storage, dropped)
    return InteractionResult(
        interaction=serialize_interaction(interaction),
        uploaded=len(added),
        failed_uploads=failures,
    )


async def delete_interaction(
    session: AsyncSession,
    storage: ObjectStorage,
    auth: AuthContext | None,
    interaction_id: int,
) -> None:
    interaction = await get_interaction(session, auth, interaction_id)
    attachments = decode_attachments(interaction.file_attachments)
    await session.delete(interaction)
    await session.commit()
    await remove_stored_objects(storage, attachments)


async def attachment_url(
    session: AsyncSession,
    storage: ObjectStorage,
    auth: AuthContext | None,
    interaction_id: int,
    attachment_id: str,
    ttl_seconds: int,
) -> SignedUrl:
    """Return a time-limited download link for one attachment."""

    interaction = await get_interaction(session, auth, interaction_id)
    for attachment in decode_attachments(interaction.file_attachments):
        if attachment.id == attachment_id:
            url = await storage.create_signed_url(attachment.path, ttl_seconds)
            return SignedUrl(url=url, expires_in=ttl_seconds)
    raise ResourceNotFoundError("Attachment not found")


async def remove_stored_objects(
    storage: ObjectStorage, attachments: Sequence[FileAttachment]
) -> None:
    """Delete stored objects, logging failures instead of raising them."""

    for attachment in attachments:
        try:
            await storage.remove(attachment.path)
        except StorageError:
            logger.warning(
                "Failed to remove stored attachment",
                extra={"attachment_id": attachment.id, "path": attachment.path},
            )


def serialize_interaction(interaction: Interaction) -> InteractionRead:
    return InteractionRead(
        id=interaction.id,
        contact_id=interaction.contact_id,
        type=interaction.type,
        date=interaction.date,
        notes=interaction.notes,
        file_attachments=decode_attachments(interaction.file_attachments),
        historical_tags=decode_historical_tags(interaction.historical_tags),
        created_at=interaction.created_at,
    )
