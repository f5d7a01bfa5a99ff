"""
Mood journal router.

  GET  /api/journal  Own entries, newest first
  POST /api/journal  Add an entry
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_current_user
from app.models.user import User
from app.schemas.journal import JournalEntryCreateRequest, JournalEntryResponse
from app.services import journal_service

router = APIRouter()


@router.get("", response_model=list[JournalEntryResponse], summary="List journal entries")
async def list_entries(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await journal_service.get_entries(db, user.id)


@router.post(
    "",
    response_model=JournalEntryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a journal entry",
)
async def create_entry(
    request: JournalEntryCreateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    entry = await journal_service.create_entry(db, user.id, request.entry, request.mood)
    await db.commit()
    return entry
