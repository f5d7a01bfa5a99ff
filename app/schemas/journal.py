"""Pydantic schemas for mood journal endpoints."""

import uuid
from datetime import datetime

from pydantic import Field

from app.models.journal import Mood
from app.schemas.base import RequestModel, ResponseModel


class JournalEntryCreateRequest(RequestModel):
    """Request body for POST /api/journal."""
    entry: str = Field(min_length=1, max_length=5000)
    mood: Mood


class JournalEntryResponse(ResponseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    entry: str
    mood: Mood
    date: datetime
