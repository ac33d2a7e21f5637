"""Database models for the contact relationship manager."""

from .base import Base
from .contact import Contact
from .interaction import Interaction, InteractionType
from .reminder import Reminder
from .tag import ContactTag, Tag

__all__ = [
    "Base",
    "Contact",
    "ContactTag",
    "Interaction",
    "InteractionType",
    "Reminder",
    "Tag",
]
