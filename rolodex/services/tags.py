"""Tag storage and per-tag contact counts."""
from __future__ import annotations

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rolodex.core.auth import AuthContext, require_owner
from rolodex.core.errors import ResourceNotFoundError
from rolodex.models import ContactTag, Tag
from rolodex.schemas import TagCreate, TagDeletion, TagRead, TagSummary, TagUpdate

PREDEFINED_COLORS = (
    "#9b87f5",
    "#f87171",
    "#fb923c",
    "#fbbf24",
    "#a3e635",
    "#34d399",
    "#22d3ee",
    "#60a5fa",
    "#c084fc",
    "#e879f9",
    "#fb7185",
    "#94a3b8",
)

logger = logging.getLogger(__name__)


async def list_tags_with_counts(
    session: AsyncSession, auth: AuthContext | None
) -> list[TagRead]:
    """Return the owner's tags with the number of contacts carrying each one."""

    owner_id = require_owner(auth)
    counts = (
        select(ContactTag.tag_id, func.count(ContactTag.id).label("contact_count"))
        .group_by(ContactTag.tag_id)
        .subquery()
    )
    stmt = (
        select(Tag, func.coalesce(counts.c.contact_count, 0))
        .outerjoin(counts, counts.c.tag_id == Tag.id)
        .where(Tag.owner_id == owner_id)
    )
    result = await session.execute(stmt)
    tags = [_serialize_tag(tag, int(count)) for tag, count in result.all()]
    return sort_tags(tags)


def sort_tags(tags: list[TagRead]) -> list[TagRead]:
    return sorted(tags, key=lambda tag: (tag.name.casefold(), tag.id))


async def get_tag(session: AsyncSession, auth: AuthContext | None, tag_id: int) -> Tag:
    owner_id = require_owner(auth)
    tag = await session.get(Tag, tag_id)
    if tag is None or tag.owner_id != owner_id:
        raise ResourceNotFoundError("Tag not found")
    return tag


async def count_contacts(session: AsyncSession, tag_id: int) -> int:
    result = await session.execute(
        select(func.count(ContactTag.id)).where(ContactTag.tag_id == tag_id)
    )
    return int(result.scalar_one())


async def create_tag(
    session: AsyncSession, auth: AuthContext | None, payload: TagCreate
) -> TagRead:
    owner_id = require_owner(auth)
    tag = Tag(owner_id=owner_id, name=payload.name, color=payload.color)
    session.add(tag)
    await session.commit()
    await session.refresh(tag)
    return _serialize_tag(tag, 0)


async def update_tag(
    session: AsyncSession, auth: AuthContext | None, tag_id: int, payload: TagUpdate
) -> TagRead:
    """Rename or recolour a tag; its contact count is preserved."""

    tag = await get_tag(session, auth, tag_id)
    for field, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(tag, field, value)
    await session.commit()
    await session.refresh(tag)
    return _serialize_tag(tag, await count_contacts(session, tag.id))


async def delete_tag(
    session: AsyncSession, auth: AuthContext | None, tag_id: int
) -> TagDeletion:
    """Delete a tag and its memberships.

    The number of affected contacts is taken before anything is removed so the
    confirmation message reflects what the deletion did.
    """

    tag = await get_tag(session, auth, tag_id)
    affected = await count_contacts(session, tag.id)
    summary = TagSummary.model_validate(tag)

    await session.execute(delete(ContactTag).where(ContactTag.tag_id == tag.id))
    await session.delete(tag)
    await session.commit()

    logger.info(
        "Tag deleted", extra={"tag_id": summary.id, "affected_contacts": affected}
    )
    return TagDeletion(
        tag=summary,
        affected_contacts=affected,
        message=deletion_message(summary.name, affected),
    )


def deletion_message(name: str, affected: int) -> str:
    if affected > 0:
        noun = "contact" if affected == 1 else "contacts"
        return f'"{name}" has been removed from {affected} {noun}.'
    return f'"{name}" has been deleted.'


def _serialize_tag(tag: Tag, contact_count: int) -> TagRead:
    return TagRead(
        id=tag.id,
        name=tag.name,
        color=tag.color,
        created_at=tag.created_at,
        contact_count=contact_count,
    )
