"""Tag API routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from rolodex.api.v1.common import data_response
from rolodex.core.auth import AuthContext, get_auth_context, require_owner
from rolodex.core.db import get_session
from rolodex.schemas import TagCreate, TagDeletion, TagRead, TagUpdate
from rolodex.services import tags as tag_service

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("/palette")
async def tag_palette(
    auth: AuthContext | None = Depends(get_auth_context),
) -> dict[str, list[str]]:
    """Colours offered when picking a tag colour."""

    require_owner(auth)
    return data_response(list(tag_service.PREDEFINED_COLORS))


@router.get("")
async def list_tags(
    session: AsyncSession = Depends(get_session),
    auth: AuthContext | None = Depends(get_auth_context),
) -> dict[str, list[TagRead]]:
    """List tags alphabetically with their contact counts."""

    tags = await tag_service.list_tags_with_counts(session, auth)
    return data_response(tags)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_tag(
    payload: TagCreate,
    session: AsyncSession = Depends(get_session),
    auth: AuthContext | None = Depends(get_auth_context),
) -> dict[str, TagRead]:
    tag = await tag_service.create_tag(session, auth, payload)
    return data_response(tag)


@router.put("/{tag_id}")
async def update_tag(
    tag_id: int,
    payload: TagUpdate,
    session: AsyncSession = Depends(get_session),
    auth: AuthContext | None = Depends(get_auth_context),
) -> dict[str, TagRead]:
    tag = await tag_service.update_tag(session, auth, tag_id, payload)
    return data_response(tag)


@router.delete("/{tag_id}")
async def delete_tag(
    tag_id: int,
    session: AsyncSession = Depends(get_session),
    auth: AuthContext | None = Depends(get_auth_context),
) -> dict[str, TagDeletion]:
    """Delete the tag and detach it from every contact."""

    deletion = await tag_service.delete_tag(session, auth, tag_id)
    return data_response(deletion)
