"""
Transactions router: ledger entries.

  GET  /api/transactions                          All own ledger entries, newest first
  GET  /api/accounts/{account_id}/transactions    One account's entries, newest first
  POST /api/transactions                          Record a credit or debit

Recording goes through the balance-mutation engine, so the entry and the
balance change are committed together.
"""

import uuid
from typing import Literal

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_current_user
from app.models.user import User
from app.schemas.transaction import TransactionCreateRequest, TransactionResponse
from app.services import account_service, transaction_service

router = APIRouter()


@router.get(
    "/transactions",
    response_model=list[TransactionResponse],
    summary="List transactions across your accounts",
)
async def list_transactions(
    type: Literal["credit", "debit"] | None = Query(None, description="Filter by type"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await transaction_service.get_user_transactions(
        db,
        user_id=user.id,
        type_filter=type,
        limit=limit,
        offset=offset,
    )


@router.get(
    "/accounts/{account_id}/transactions",
    response_model=list[TransactionResponse],
    summary="List transactions for an account",
)
async def list_account_transactions(
    account_id: uuid.UUID,
    type: Literal["credit", "debit"] | None = Query(None, description="Filter by type"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List a single account's ledger, newest first. 403 for accounts you don't own."""
    return await transaction_service.get_account_transactions(
        db,
        account_id=account_id,
        user_id=user.id,
        type_filter=type,
        limit=limit,
        offset=offset,
    )


@router.post(
    "/transactions",
    response_model=TransactionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a transaction (credit or debit)",
)
async def create_transaction(
    request: TransactionCreateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Record a credit (money in) or debit (money out) on one of your accounts.

    The account balance is updated in the same database transaction.
    """
    await account_service.get_account(db, request.account_id, user.id)

    txn = await transaction_service.apply_transaction(
        db,
        account_id=request.account_id,
        amount=request.amount,
        txn_type=request.type,
        description=request.description,
        category=request.category,
        merchant=request.merchant,
    )
    await db.commit()
    return txn
