"""Pydantic schemas for the AI advice endpoints."""

import uuid
from datetime import datetime

from pydantic import Field

from app.schemas.base import RequestModel, ResponseModel


class AdviceRequest(RequestModel):
    """Request body for POST /api/ai/advice."""
    query: str = Field(min_length=1, max_length=2000)


class AdviceResponse(ResponseModel):
    """A stored advice record. `response` is rendered HTML."""
    id: uuid.UUID
    user_id: uuid.UUID
    query: str
    response: str
    date: datetime
