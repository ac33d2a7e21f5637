"""Tag model and the contact/tag join table."""
from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rolodex.models.base import Base

if TYPE_CHECKING:
    from rolodex.models.contact import Contact

DEFAULT_TAG_COLOR = "#9b87f5"


class Tag(Base):
    """A coloured label owned by one user."""

    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(primary_key=True)
    owner_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    color: Mapped[str] = mapped_column(String(7), nullable=False, default=DEFAULT_TAG_COLOR)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False), server_default=func.now(), nullable=False
    )

    contact_tags: Mapped[list["ContactTag"]] = relationship(
        back_populates="tag", cascade="all, delete-orphan"
    )


class ContactTag(Base):
    """Membership of a contact in a tag."""

    __tablename__ = "contact_tags"
    __table_args__ = (
        UniqueConstraint("contact_id", "tag_id", name="uq_contact_tags_contact_tag"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    contact_id: Mapped[int] = mapped_column(
        ForeignKey("contacts.id", ondelete="CASCADE"), index=True, nullable=False
    )
    tag_id: Mapped[int] = mapped_column(
        ForeignKey("tags.id", ondelete="CASCADE"), index=True, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False), server_default=func.now(), nullable=False
    )

    contact: Mapped["Contact"] = relationship(back_populates="contact_tags")
    tag: Mapped["Tag"] = relationship(back_populates="contact_tags")
