"""
JournalEntry model: an append-only mood journal.

Each entry is a free-text note tagged with one of four moods. Entries are
never edited; the advice generator reads the most recent ones to infer the
user's emotional state.
"""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Text, String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Mood(str, enum.Enum):
    """
    The emotional state attached to a journal entry.

    Inherits from str so the value serializes naturally to JSON and is
    stored as a plain string.
    """
    SAD = "sad"
    NEUTRAL = "neutral"
    HAPPY = "happy"
    VERY_HAPPY = "very-happy"


class JournalEntry(Base):
    __tablename__ = "journal_entries"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    entry: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    # Stored as the enum value ("very-happy"), not the member name
    mood: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
    )

    date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )
