"""Pydantic schemas for savings goal endpoints."""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import Field

from app.schemas.base import PositiveAmount, RequestModel, ResponseModel


class GoalCreateRequest(RequestModel):
    """Request body for POST /api/goals."""
    name: str = Field(min_length=1, max_length=100)
    target_amount: PositiveAmount
    deadline: datetime | None = None


class GoalFundRequest(RequestModel):
    """Request body for PATCH /api/goals/{goal_id}: adds funds to the goal."""
    amount: PositiveAmount


class GoalResponse(ResponseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    name: str
    target_amount: Decimal
    current_amount: Decimal
    deadline: datetime | None
    completed: bool
    created_at: datetime
