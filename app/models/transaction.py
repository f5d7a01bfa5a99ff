"""
Transaction model: one immutable ledger entry on one account.

Every movement of money creates a Transaction record:

  - A deposit or refund creates one CREDIT entry (money into the account)
  - A purchase or withdrawal creates one DEBIT entry (money out)
  - A transfer creates TWO entries: a DEBIT on the source account and a
    CREDIT on the destination account, written in the same database
    transaction as both balance updates

Key fields:
  - type: "credit" or "debit", the direction of money flow
  - amount_cents: Always positive (the direction is implied by the type)
  - description: Required free-text memo
  - category / merchant: Optional tags used for spending summaries
  - date: When the entry was recorded; indexed for newest-first listing

Entries are never updated or deleted. They are created only by the
balance-mutation engine, never directly by a router.
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import String, Integer, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.money import from_cents


class Transaction(Base):
    __tablename__ = "transactions"

    __table_args__ = (
        # Amount must always be positive; direction is indicated by type
        CheckConstraint("amount_cents > 0", name="ck_transactions_positive_amount"),
        CheckConstraint("type IN ('credit', 'debit')", name="ck_transactions_type"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )

    account_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("accounts.id"),
        nullable=False,
        index=True,
    )

    # Amount in cents, always positive
    amount_cents: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    description: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    category: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
    )

    merchant: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
    )

    date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )

    # "credit" (money in) or "debit" (money out)
    type: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
    )

    @property
    def amount(self) -> Decimal:
        return from_cents(self.amount_cents)
