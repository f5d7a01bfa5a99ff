"""
Savings goals router.

  GET   /api/goals            List own goals
  POST  /api/goals            Create a goal
  PATCH /api/goals/{goal_id}  Add funds to a goal (body: {"amount": "60.00"})
"""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_current_user
from app.models.user import User
from app.schemas.goal import GoalCreateRequest, GoalFundRequest, GoalResponse
from app.services import goal_service

router = APIRouter()


@router.get("", response_model=list[GoalResponse], summary="List your savings goals")
async def list_goals(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await goal_service.get_goals(db, user.id)


@router.post(
    "",
    response_model=GoalResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a savings goal",
)
async def create_goal(
    request: GoalCreateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    goal = await goal_service.create_goal(
        db,
        user_id=user.id,
        name=request.name,
        target_amount=request.target_amount,
        deadline=request.deadline,
    )
    await db.commit()
    return goal


@router.patch(
    "/{goal_id}",
    response_model=GoalResponse,
    summary="Add funds to a savings goal",
)
async def add_funds(
    goal_id: uuid.UUID,
    request: GoalFundRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Add money to a goal. The goal is marked completed once the saved
    amount reaches the target.
    """
    await goal_service.get_goal(db, goal_id, user.id)
    goal = await goal_service.add_funds(db, goal_id, request.amount)
    await db.commit()
    return goal
