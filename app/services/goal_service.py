"""
Goal service: savings goals and the goal-progress updater.

Goals only accumulate. add_funds() is the single mutation: it adds to the
current amount and recomputes the completion flag in one UPDATE that
reads the stored values (current_amount_cents + :amount), so two concurrent
deposits cannot lose each other's update.
"""

import logging
import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import GoalNotFoundError, InvalidAmountError, UnauthorizedAccessError
from app.models.goal import SavingGoal
from app.money import to_cents

logger = logging.getLogger(__name__)


async def create_goal(
    db: AsyncSession,
    user_id: uuid.UUID,
    name: str,
    target_amount: Decimal,
    deadline: datetime | None = None,
) -> SavingGoal:
    """Create a goal with nothing saved yet."""
    try:
        target_cents = to_cents(target_amount)
    except ValueError:
        raise InvalidAmountError(target_amount)
    if target_cents <= 0:
        raise InvalidAmountError(target_amount)

    goal = SavingGoal(
        user_id=user_id,
        name=name,
        target_amount_cents=target_cents,
        current_amount_cents=0,
        deadline=deadline,
        completed=False,
    )
    db.add(goal)
    await db.flush()
    return goal


async def get_goals(db: AsyncSession, user_id: uuid.UUID) -> list[SavingGoal]:
    result = await db.execute(
        select(SavingGoal)
        .where(SavingGoal.user_id == user_id)
        .order_by(SavingGoal.created_at)
    )
    return list(result.scalars().all())


async def get_goal(
    db: AsyncSession,
    goal_id: uuid.UUID,
    user_id: uuid.UUID,
) -> SavingGoal:
    """
    Get a single goal, verifying ownership.

    Raises:
        UnauthorizedAccessError: If the goal doesn't exist or belongs to
                                 someone else.
    """
    result = await db.execute(select(SavingGoal).where(SavingGoal.id == goal_id))
    goal = result.scalar_one_or_none()

    if goal is None or goal.user_id != user_id:
        raise UnauthorizedAccessError("You do not have access to this goal")

    return goal


async def add_funds(
    db: AsyncSession,
    goal_id: uuid.UUID,
    amount: Decimal,
) -> SavingGoal:
    """
    Deposit into a goal and recompute its completion flag.

    current = current + amount
    completed = current >= target

    Returns:
        The updated SavingGoal.

    Raises:
        InvalidAmountError: If the amount is not positive or finer than a cent.
        GoalNotFoundError: If the goal doesn't exist.
    """
    try:
        amount_cents = to_cents(amount)
    except ValueError:
        raise InvalidAmountError(amount)
    if amount_cents <= 0:
        raise InvalidAmountError(amount)

    result = await db.execute(
        select(SavingGoal)
        .where(SavingGoal.id == goal_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    goal = result.scalar_one_or_none()
    if goal is None:
        raise GoalNotFoundError(goal_id)

    was_completed = goal.completed
    new_amount = SavingGoal.current_amount_cents + amount_cents
    await db.execute(
        update(SavingGoal)
        .where(SavingGoal.id == goal_id)
        .values(
            current_amount_cents=new_amount,
            completed=new_amount >= SavingGoal.target_amount_cents,
        )
        .execution_options(synchronize_session=False)
    )
    await db.refresh(goal)

    if goal.completed and not was_completed:
        logger.info("Savings goal %s reached its target", goal.id)

    return goal
