"""Interaction model definition."""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, DateTime, Enum as SQLEnum, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rolodex.models.base import Base

if TYPE_CHECKING:
    from rolodex.models.contact import Contact


class InteractionType(str, Enum):
    """Permitted interaction categories."""

    CALL = "Call"
    MEETING = "Meeting"
    EMAIL = "Email"
    FOLLOW_UP = "Follow-up"
    PHONE_CALL = "Phone Call"
    VIDEO_CALL = "Video Call"
    SOCIAL_MEDIA = "Social Media"
    TEXT_MESSAGE = "Text Message"
    LINKEDIN = "LinkedIn"
    WHATSAPP = "WhatsApp"
    TWITTER = "Twitter"
    OTHER = "Other"


class Interaction(Base):
    """A recorded interaction with a contact.

    ``file_attachments`` and ``historical_tags`` hold JSON envelopes written by
    the interaction service; read them through the decoders in
    :mod:`rolodex.schemas.embedded`.
    """

    __tablename__ = "contact_interactions"

    id: Mapped[int] = mapped_column(primary_key=True)
    contact_id: Mapped[int] = mapped_column(
        ForeignKey("contacts.id", ondelete="CASCADE"), index=True, nullable=False
    )
    owner_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    type: Mapped[InteractionType] = mapped_column(
        SQLEnum(
            InteractionType,
            name="interaction_type",
            values_callable=lambda members: [member.value for member in members],
        ),
        nullable=False,
    )
    date: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text())
    file_attachments: Mapped[Any] = mapped_column(JSON)
    historical_tags: Mapped[Any] = mapped_column(JSON)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False), server_default=func.now(), nullable=False
    )

    contact: Mapped["Contact"] = relationship(back_populates="interactions")
