"""
Account model: a checking or savings account owned by a User.

Each account has:
  - A display name chosen by the user ("Everyday Checking")
  - A unique account number (randomly generated 10-digit string)
  - A type: "checking" or "savings"
  - A balance in integer cents

Balance management:
  `balance_cents` is only ever changed by the balance-mutation engine
  (app/services/transaction_service.py), in the same database transaction
  as the ledger entry that explains the change. It therefore always equals
  credits minus debits over the account's ledger.

  The balance is non-negative by convention only. Transfers refuse to
  overdraw the source, but there is no CHECK constraint: a recorded
  single-sided debit (e.g. a card purchase imported after the fact) is
  allowed to take the balance below zero.

Why integer cents?
  Binary floating point cannot represent most decimal fractions exactly
  (0.1 + 0.2 != 0.3). Integer cents make all arithmetic exact; the API
  exposes `balance` as a two-place Decimal derived from the stored cents.
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import String, Integer, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.money import from_cents


class Account(Base):
    __tablename__ = "accounts"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )

    # Owner of this account
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    # Unique 10-digit account number (generated at creation time)
    account_number: Mapped[str] = mapped_column(
        String(20),
        unique=True,
        nullable=False,
    )

    # Balance in cents, updated only together with a ledger entry
    balance_cents: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    # "checking" or "savings"
    type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="checking",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # --- Relationships ---
    user: Mapped["User"] = relationship(
        back_populates="accounts",
    )

    @property
    def balance(self) -> Decimal:
        return from_cents(self.balance_cents)

    @property
    def masked_number(self) -> str:
        """Last four digits of the account number, as shown on statements."""
        return self.account_number[-4:]
