"""
Transfers router: money movement between the caller's own accounts.

Endpoints:
  POST /api/transfer  Transfer money from one account to another

A transfer creates two ledger entries (a debit on the source, a credit on
the destination) and updates both balances in one database transaction.
Both accounts must belong to the authenticated user.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.database import get_db
from app.dependencies import get_current_user, get_settings
from app.models.user import User
from app.schemas.transaction import TransferRequest, TransferResponse, TransactionResponse
from app.services import account_service, transaction_service

router = APIRouter()


@router.post(
    "",
    response_model=TransferResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Transfer money between your accounts",
)
async def create_transfer(
    request: TransferRequest,
    user: User = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
    db: AsyncSession = Depends(get_db),
):
    """
    Transfer money from one of your accounts to another.

    Either both legs succeed or neither does. The transfer is rejected with
    400 if the source account has insufficient funds, and with 403 if
    either account is not yours.
    """
    await account_service.get_account(db, request.from_account_id, user.id)
    await account_service.get_account(db, request.to_account_id, user.id)

    debit_txn, credit_txn = await transaction_service.transfer(
        db,
        from_account_id=request.from_account_id,
        to_account_id=request.to_account_id,
        amount=request.amount,
        description=request.description,
        merchant=settings.TRANSFER_MERCHANT,
    )
    await db.commit()

    return TransferResponse(
        source_transaction=TransactionResponse.model_validate(debit_txn),
        target_transaction=TransactionResponse.model_validate(credit_txn),
    )
