"""
Account service: business logic for account operations.

This module handles:
  - Account opening (with unique account number generation and an optional
    opening deposit, applied through the balance-mutation engine)
  - Account retrieval (single or list, scoped to the owning user)
  - Balance reconciliation (stored balance vs. balance computed from the ledger)

Ownership enforcement:
  Query functions accept a `user_id` parameter, always the authenticated
  user's ID set by the dependency layer. The scoping happens here, not in
  the router. An account that does not exist is reported exactly like an
  account owned by someone else, so callers cannot discover valid IDs.
"""

import random
import string
import uuid
from decimal import Decimal

from sqlalchemy import select, func, case
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import UnauthorizedAccessError
from app.models.account import Account
from app.models.transaction import Transaction
from app.money import from_cents
from app.services import transaction_service


def _generate_account_number() -> str:
    """
    Generate a random 10-digit account number.

    Random rather than sequential, so account numbers can't be guessed.
    """
    return "".join(random.choices(string.digits, k=10))


async def create_account(
    db: AsyncSession,
    user_id: uuid.UUID,
    name: str,
    account_type: str = "checking",
    initial_deposit: Decimal = Decimal("0"),
) -> Account:
    """
    Open a new account for a user.

    The account starts at a zero balance. A positive initial_deposit is
    then applied as a credit ledger entry, so the opening balance is
    explained by the ledger like every other balance change.

    Args:
        db: Database session.
        user_id: The owner's user ID.
        name: Display name for the account.
        account_type: "checking" or "savings".
        initial_deposit: Optional opening balance.

    Returns:
        The newly created Account instance.
    """
    # Generate a unique account number (retry if collision, extremely unlikely)
    for _ in range(10):
        account_number = _generate_account_number()
        existing = await db.execute(
            select(Account).where(Account.account_number == account_number)
        )
        if existing.scalar_one_or_none() is None:
            break
    else:
        raise RuntimeError("Failed to generate a unique account number")

    account = Account(
        user_id=user_id,
        name=name,
        type=account_type,
        account_number=account_number,
        balance_cents=0,
    )
    db.add(account)
    await db.flush()

    if initial_deposit > 0:
        await transaction_service.apply_transaction(
            db,
            account_id=account.id,
            amount=initial_deposit,
            txn_type="credit",
            description="Opening deposit",
        )

    return account


async def get_accounts(
    db: AsyncSession,
    user_id: uuid.UUID,
) -> list[Account]:
    """List all accounts belonging to a user, oldest first."""
    result = await db.execute(
        select(Account)
        .where(Account.user_id == user_id)
        .order_by(Account.created_at)
    )
    return list(result.scalars().all())


async def get_account(
    db: AsyncSession,
    account_id: uuid.UUID,
    user_id: uuid.UUID,
) -> Account:
    """
    Get a single account, verifying ownership.

    Raises:
        UnauthorizedAccessError: If the account doesn't exist or belongs
                                 to someone else.
    """
    result = await db.execute(select(Account).where(Account.id == account_id))
    account = result.scalar_one_or_none()

    if account is None or account.user_id != user_id:
        raise UnauthorizedAccessError("You do not have access to this account")

    return account


async def get_balance(
    db: AsyncSession,
    account_id: uuid.UUID,
    user_id: uuid.UUID,
) -> dict:
    """
    Get the account balance, both stored and computed from the ledger.

    Returns:
        Dict with account_id, balance, computed_balance and match.
    """
    account = await get_account(db, account_id, user_id)
    computed_cents = await _compute_balance_from_transactions(db, account_id)

    return {
        "account_id": account.id,
        "balance": account.balance,
        "computed_balance": from_cents(computed_cents),
        "match": account.balance_cents == computed_cents,
    }


async def _compute_balance_from_transactions(
    db: AsyncSession,
    account_id: uuid.UUID,
) -> int:
    """Sum the account's ledger: credits add, debits subtract."""
    signed_amount = case(
        (Transaction.type == "credit", Transaction.amount_cents),
        else_=-Transaction.amount_cents,
    )
    result = await db.execute(
        select(func.coalesce(func.sum(signed_amount), 0))
        .where(Transaction.account_id == account_id)
    )
    return result.scalar()
