"""Journal service: append-only mood journal."""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.journal import JournalEntry, Mood


async def create_entry(
    db: AsyncSession,
    user_id: uuid.UUID,
    entry: str,
    mood: Mood,
) -> JournalEntry:
    journal_entry = JournalEntry(user_id=user_id, entry=entry, mood=Mood(mood).value)
    db.add(journal_entry)
    await db.flush()
    return journal_entry


async def get_entries(
    db: AsyncSession,
    user_id: uuid.UUID,
    limit: int | None = None,
) -> list[JournalEntry]:
    """A user's journal entries, newest first."""
    query = (
        select(JournalEntry)
        .where(JournalEntry.user_id == user_id)
        .order_by(JournalEntry.date.desc())
    )
    if limit is not None:
        query = query.limit(limit)

    result = await db.execute(query)
    return list(result.scalars().all())
