"""
Pydantic schemas for Transaction and Transfer endpoints.

All monetary amounts are positive decimals; the direction of a ledger
entry is carried by its type ("credit" or "debit").
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import Field, model_validator

from app.schemas.base import PositiveAmount, RequestModel, ResponseModel


class TransactionCreateRequest(RequestModel):
    """Request body for POST /api/transactions."""
    account_id: uuid.UUID
    amount: PositiveAmount
    type: Literal["credit", "debit"]
    description: str = Field(min_length=1, max_length=255)
    category: str | None = Field(None, max_length=100)
    merchant: str | None = Field(None, max_length=100)


class TransactionResponse(ResponseModel):
    """Public representation of a ledger entry."""
    id: uuid.UUID
    account_id: uuid.UUID
    amount: Decimal
    description: str
    category: str | None
    merchant: str | None
    date: datetime
    type: str


class TransferRequest(RequestModel):
    """Request body for POST /api/transfer."""
    from_account_id: uuid.UUID
    to_account_id: uuid.UUID
    amount: PositiveAmount
    description: str = Field(min_length=1, max_length=200)

    @model_validator(mode="after")
    def accounts_must_differ(self):
        """Cannot transfer money to the same account."""
        if self.from_account_id == self.to_account_id:
            raise ValueError("Cannot transfer to the same account")
        return self


class TransferResponse(ResponseModel):
    """Response body for a successful transfer: both ledger entries."""
    source_transaction: TransactionResponse
    target_transaction: TransactionResponse
