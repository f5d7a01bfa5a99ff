"""
SavingGoal model: a savings target the user funds over time.

A goal is a (target, current) pair plus a completion flag. Goals only
accumulate: deposits add to current_amount_cents and there is no withdraw
or reset. `completed` is recomputed as current >= target on every deposit
by the goal-progress updater (app/services/goal_service.py). Because the
current amount never decreases, a completed goal stays completed.
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import String, Integer, Boolean, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.money import from_cents


class SavingGoal(Base):
    __tablename__ = "saving_goals"

    __table_args__ = (
        CheckConstraint("target_amount_cents > 0", name="ck_saving_goals_positive_target"),
        CheckConstraint("current_amount_cents >= 0", name="ck_saving_goals_non_negative_current"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    target_amount_cents: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    current_amount_cents: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    deadline: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    completed: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    @property
    def target_amount(self) -> Decimal:
        return from_cents(self.target_amount_cents)

    @property
    def current_amount(self) -> Decimal:
        return from_cents(self.current_amount_cents)

    @property
    def progress_percentage(self) -> float:
        """Share of the target reached so far, in percent (may exceed 100)."""
        return self.current_amount_cents / self.target_amount_cents * 100
