"""Membership of contacts in tags.

Two write strategies are exposed: :meth:`ContactTagManager.replace` sets the
full tag list of a contact (used when a contact form is saved) and
:meth:`ContactTagManager.toggle` flips a single tag (used by inline tag
pickers). Both reduce to the same ``_write`` primitive, so reaching a tag set
by either route leaves the same rows behind.
"""
from __future__ import annotations

import logging
from collections.abc import Collection, Iterable, Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rolodex.core.auth import AuthContext, require_owner
from rolodex.core.errors import ResourceNotFoundError
from rolodex.models import Contact, ContactTag, Tag

logger = logging.getLogger(__name__)


class ContactTagManager:
    """Read and write the tags of the current owner's contacts."""

    def __init__(self, session: AsyncSession, auth: AuthContext | None) -> None:
        self.session = session
        self.owner_id = require_owner(auth)

    async def tags_for_contact(self, contact_id: int) -> list[Tag]:
        await self._require_contact(contact_id)
        stmt = (
            select(Tag)
            .join(ContactTag, ContactTag.tag_id == Tag.id)
            .where(ContactTag.contact_id == contact_id)
            .order_by(func.lower(Tag.name), Tag.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars())

    async def tags_by_contact(self, contact_ids: Sequence[int]) -> dict[int, list[Tag]]:
        """Return the tags of several contacts in one query."""

        if not contact_ids:
            return {}
        stmt = (
            select(ContactTag.contact_id, Tag)
            .join(Tag, ContactTag.tag_id == Tag.id)
            .where(ContactTag.contact_id.in_(contact_ids))
            .where(Tag.owner_id == self.owner_id)
            .order_by(func.lower(Tag.name), Tag.id)
        )
        result = await self.session.execute(stmt)
        tags: dict[int, list[Tag]] = {}
        for contact_id, tag in result.all():
            tags.setdefault(contact_id, []).append(tag)
        return tags

    async def contact_ids_for_tags(self, tag_ids: Iterable[int]) -> set[int]:
        """Return the contacts carrying at least one of ``tag_ids``."""

        tag_ids = list(tag_ids)
        if not tag_ids:
            return set()
        stmt = (
            select(ContactTag.contact_id)
            .join(Tag, ContactTag.tag_id == Tag.id)
            .where(ContactTag.tag_id.in_(tag_ids))
            .where(Tag.owner_id == self.owner_id)
            .distinct()
        )
        result = await self.session.execute(stmt)
        return set(result.scalars())

    async def replace(self, contact_id: int, tag_ids: Sequence[int]) -> list[Tag]:
        """Make ``tag_ids`` the complete tag set of the contact and commit."""

        await self.stage_replace(contact_id, tag_ids)
        await self.session.commit()
        return await self.tags_for_contact(contact_id)

    async def stage_replace(self, contact_id: int, tag_ids: Sequence[int]) -> None:
        """Apply a replace inside the caller's transaction without committing."""

        target = list(dict.fromkeys(tag_ids))
        await self._require_contact(contact_id)
        await self._require_tags(target)

        current = await self._current_tag_ids(contact_id)
        await self._write(
            contact_id,
            add=[tag_id for tag_id in target if tag_id not in current],
            remove=current - set(target),
        )

    async def toggle(self, contact_id: int, tag_id: int) -> bool:
        """Attach the tag if absent, detach it if present.

        Returns whether the tag is attached after the call.
        """

        await self._require_contact(contact_id)
        await self._require_tags([tag_id])

        current = await self._current_tag_ids(contact_id)
        if tag_id in current:
            await self._write(contact_id, add=(), remove={tag_id})
            selected = False
        else:
            await self._write(contact_id, add=(tag_id,), remove=())
            selected = True
        await self.session.commit()
        return selected

    async def _write(
        self, contact_id: int, *, add: Sequence[int], remove: Collection[int]
    ) -> None:
        if remove:
            await self.session.execute(
                delete(ContactTag)
                .where(ContactTag.contact_id == contact_id)
                .where(ContactTag.tag_id.in_(list(remove)))
            )
        for tag_id in add:
            self.session.add(ContactTag(contact_id=contact_id, tag_id=tag_id))
        await self.session.flush()
        logger.info(
            "Contact tags written",
            extra={"contact_id": contact_id, "added": list(add), "removed": sorted(remove)},
        )

    async def _current_tag_ids(self, contact_id: int) -> set[int]:
        result = await self.session.execute(
            select(ContactTag.tag_id).where(ContactTag.contact_id == contact_id)
        )
        return set(result.scalars())

    async def _require_contact(self, contact_id: int) -> None:
        result = await self.session.execute(
            select(Contact.id)
            .where(Contact.id == contact_id)
            .where(Contact.owner_id == self.owner_id)
        )
        if result.scalar_one_or_none() is None:
            raise ResourceNotFoundError("Contact not found")

    async def _require_tags(self, tag_ids: Sequence[int]) -> None:
        if not tag_ids:
            return
        result = await self.session.execute(
            select(Tag.id).where(Tag.id.in_(tag_ids)).where(Tag.owner_id == self.owner_id)
        )
        missing = set(tag_ids) - set(result.scalars())
        if missing:
            raise ResourceNotFoundError(
                f"Tag not found: {', '.join(str(tag_id) for tag_id in sorted(missing))}"
            )
