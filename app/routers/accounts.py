"""
Accounts router: account management endpoints.

All endpoints require a JWT and are scoped to the authenticated user:
  POST /api/accounts                       Open a new account
  GET  /api/accounts                       List own accounts
  GET  /api/accounts/{account_id}/balance  Stored vs. ledger-computed balance

The ledger listing for one account lives in the transactions router.
"""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_current_user
from app.models.user import User
from app.schemas.account import AccountCreateRequest, AccountResponse, BalanceResponse
from app.services import account_service

router = APIRouter()


@router.post(
    "",
    response_model=AccountResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Open a new account",
)
async def create_account(
    request: AccountCreateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Open a new checking or savings account.

    The account gets a randomly generated 10-digit account number. A
    positive **initialDeposit** is recorded as an "Opening deposit" credit,
    so the opening balance shows up in the ledger.
    """
    account = await account_service.create_account(
        db=db,
        user_id=user.id,
        name=request.name,
        account_type=request.type,
        initial_deposit=request.initial_deposit,
    )
    await db.commit()
    return account


@router.get(
    "",
    response_model=list[AccountResponse],
    summary="List your accounts",
)
async def list_accounts(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List all accounts owned by the authenticated user."""
    return await account_service.get_accounts(db, user.id)


@router.get(
    "/{account_id}/balance",
    response_model=BalanceResponse,
    summary="Check account balance",
)
async def get_balance(
    account_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Get the account balance, both stored and computed from the ledger.

    `match` is false only if the stored balance disagrees with the sum of
    the account's ledger entries.
    """
    return await account_service.get_balance(db, account_id, user.id)
