"""
Transaction service: the balance-mutation engine and ledger queries.

THIS IS THE MOST CRITICAL FILE IN THE PROJECT. It handles:
  - Applying a single credit or debit to an account (apply_transaction)
  - Executing transfers between two accounts (transfer)
  - Listing ledger entries for an account or for all of a user's accounts

Atomicity:
  Every balance change and the ledger entry that explains it are written
  through the SAME session, and the session belongs to one database
  transaction (one per HTTP request, see app.database.get_db). If anything
  fails before commit, the whole unit rolls back: there is never a ledger
  entry without its balance change, or a debit leg without its credit leg.

  Transfers perform every check (amount, distinct accounts, existence,
  sufficient funds) before the first ledger write, so a rejected transfer
  changes nothing and leaves no ledger entries behind.

Balance updates:
  Balances are never computed in Python and written back. Every change is
  a single UPDATE ... SET balance_cents = balance_cents +/- :amount, and
  the transfer debit only matches while balance_cents >= :amount. A
  concurrent writer therefore can't overwrite another's change, and a
  transfer can't overdraw even if the balance moved after we read it.

Locking:
  Accounts are read with SELECT ... FOR UPDATE first, which holds the rows
  on PostgreSQL for the rest of the transaction. populate_existing makes
  the locked read refresh any copy already in the session's identity map
  (e.g. one loaded by an ownership check a moment earlier).

  When a transfer involves two accounts, we always lock them in a
  consistent order (sorted by UUID). This prevents the classic deadlock
  where A->B locks A then waits on B while B->A locks B then waits on A.

SQLite note:
  SQLite doesn't support SELECT ... FOR UPDATE, so with_for_update() is a
  no-op there. Transactions on SQLite start with BEGIN IMMEDIATE instead
  (see app.database), which serializes writers.

Ownership is NOT checked here. The API layer verifies that the caller owns
every account involved before calling into the engine.
"""

import logging
import uuid
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import (
    AccountNotFoundError,
    InsufficientFundsError,
    InvalidAmountError,
    SameAccountTransferError,
)
from app.models.account import Account
from app.models.transaction import Transaction
from app.money import from_cents, to_cents

logger = logging.getLogger(__name__)

TRANSFER_CATEGORY = "Transfer"


def _positive_cents(amount: Decimal) -> int:
    """Convert an amount to cents, rejecting zero, negatives and sub-cent values."""
    try:
        cents = to_cents(amount)
    except ValueError:
        raise InvalidAmountError(amount)
    if cents <= 0:
        raise InvalidAmountError(amount)
    return cents


async def _lock_account(db: AsyncSession, account_id: uuid.UUID) -> Account | None:
    result = await db.execute(
        select(Account)
        .where(Account.id == account_id)
        .with_for_update()  # No-op on SQLite, locks row on PostgreSQL
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _shift_balance(
    db: AsyncSession,
    account_id: uuid.UUID,
    delta_cents: int,
    require_funds: bool = False,
) -> bool:
    """
    Add delta_cents (negative for a debit) to the stored balance.

    With require_funds, the row only matches while the balance covers the
    debit. Returns False when nothing was updated.
    """
    stmt = update(Account).where(Account.id == account_id)
    if require_funds:
        stmt = stmt.where(Account.balance_cents >= -delta_cents)

    result = await db.execute(
        stmt.values(balance_cents=Account.balance_cents + delta_cents)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


async def apply_transaction(
    db: AsyncSession,
    account_id: uuid.UUID,
    amount: Decimal,
    txn_type: str,
    description: str,
    category: str | None = None,
    merchant: str | None = None,
) -> Transaction:
    """
    Record a single credit or debit and apply it to the account balance.

    credit: balance + amount
    debit:  balance - amount (may go below zero; only transfers refuse to
            overdraw)

    Args:
        db: Database session.
        account_id: The account to credit/debit.
        amount: Positive decimal amount with at most two decimal places.
        txn_type: "credit" or "debit".
        description: Memo stored on the ledger entry.
        category: Optional spending category ("Groceries").
        merchant: Optional merchant name.

    Returns:
        The created Transaction instance.

    Raises:
        InvalidAmountError: If the amount is not positive or finer than a cent.
        AccountNotFoundError: If the account doesn't exist.
    """
    if txn_type not in ("credit", "debit"):
        raise ValueError(f"Unknown transaction type: {txn_type!r}")

    amount_cents = _positive_cents(amount)

    account = await _lock_account(db, account_id)
    if account is None:
        raise AccountNotFoundError(account_id)

    txn = Transaction(
        account_id=account_id,
        amount_cents=amount_cents,
        description=description,
        category=category,
        merchant=merchant,
        type=txn_type,
    )
    db.add(txn)

    delta_cents = -amount_cents if txn_type == "debit" else amount_cents
    await _shift_balance(db, account_id, delta_cents)

    await db.flush()
    await db.refresh(account)
    return txn


async def transfer(
    db: AsyncSession,
    from_account_id: uuid.UUID,
    to_account_id: uuid.UUID,
    amount: Decimal,
    description: str,
    merchant: str = "NeuroBank",
) -> tuple[Transaction, Transaction]:
    """
    Move money from one account to another.

    Creates TWO ledger entries (a debit on the source, a credit on the
    destination) for the same amount and updates both balances, all in the
    caller's database transaction.

    DEADLOCK PREVENTION: Accounts are locked in sorted UUID order.

    Args:
        db: Database session.
        from_account_id: Source account.
        to_account_id: Destination account.
        amount: Positive decimal amount with at most two decimal places.
        description: Memo; the debit leg records it as "Transfer: <memo>".
        merchant: Merchant recorded on both legs.

    Returns:
        Tuple of (debit_transaction, credit_transaction).

    Raises:
        InvalidAmountError: If the amount is not positive or finer than a cent.
        SameAccountTransferError: If source and destination are the same account.
        AccountNotFoundError: If either account doesn't exist.
        InsufficientFundsError: If the source balance is lower than the amount.
    """
    amount_cents = _positive_cents(amount)

    if from_account_id == to_account_id:
        raise SameAccountTransferError(from_account_id)

    # Lock accounts in consistent order (sorted by UUID) to prevent deadlocks
    locked: dict[uuid.UUID, Account] = {}
    for account_id in sorted([from_account_id, to_account_id]):
        account = await _lock_account(db, account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        locked[account_id] = account

    source = locked[from_account_id]
    dest = locked[to_account_id]

    if not await _shift_balance(db, source.id, -amount_cents, require_funds=True):
        await db.refresh(source)
        logger.warning(
            "Transfer declined: account %s has %s, requested %s",
            source.id, source.balance, from_cents(amount_cents),
        )
        raise InsufficientFundsError(
            account_id=from_account_id,
            requested=from_cents(amount_cents),
            available=source.balance,
        )
    await _shift_balance(db, dest.id, amount_cents)

    debit_txn = Transaction(
        account_id=source.id,
        amount_cents=amount_cents,
        description=f"Transfer: {description}",
        category=TRANSFER_CATEGORY,
        merchant=merchant,
        type="debit",
    )
    credit_txn = Transaction(
        account_id=dest.id,
        amount_cents=amount_cents,
        description=f"Transfer from account {source.masked_number}",
        category=TRANSFER_CATEGORY,
        merchant=merchant,
        type="credit",
    )
    db.add_all([debit_txn, credit_txn])
    await db.flush()

    await db.refresh(source)
    await db.refresh(dest)

    logger.info(
        "Transferred %s from account %s to account %s",
        from_cents(amount_cents), source.id, dest.id,
    )
    return debit_txn, credit_txn


# ---------------------------------------------------------------------------
# Read helpers
# ---------------------------------------------------------------------------

async def get_account_transactions(
    db: AsyncSession,
    account_id: uuid.UUID,
    user_id: uuid.UUID,
    type_filter: str | None = None,
    limit: int = 50,
    offset: int = 0,
) -> list[Transaction]:
    """
    List ledger entries for one account, newest first.

    Raises:
        UnauthorizedAccessError: If the account doesn't exist or belongs
                                 to someone else.
    """
    # Verify ownership first
    from app.services.account_service import get_account
    await get_account(db, account_id, user_id)

    query = select(Transaction).where(Transaction.account_id == account_id)
    if type_filter:
        query = query.where(Transaction.type == type_filter)

    result = await db.execute(
        query.order_by(Transaction.date.desc()).limit(limit).offset(offset)
    )
    return list(result.scalars().all())


async def get_user_transactions(
    db: AsyncSession,
    user_id: uuid.UUID,
    type_filter: str | None = None,
    limit: int | None = 50,
    offset: int = 0,
) -> list[Transaction]:
    """
    List ledger entries across all of a user's accounts, newest first.

    A user with no accounts gets an empty list. Pass limit=None for the
    complete ledger.
    """
    query = (
        select(Transaction)
        .join(Account, Transaction.account_id == Account.id)
        .where(Account.user_id == user_id)
    )
    if type_filter:
        query = query.where(Transaction.type == type_filter)

    query = query.order_by(Transaction.date.desc()).offset(offset)
    if limit is not None:
        query = query.limit(limit)

    result = await db.execute(query)
    return list(result.scalars().all())
