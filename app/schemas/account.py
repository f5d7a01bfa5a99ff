"""
Pydantic schemas for Account endpoints.

These schemas define the API contract for account creation, retrieval,
and balance reconciliation. Monetary amounts are two-place decimals.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import Field

from app.schemas.base import NonNegativeAmount, RequestModel, ResponseModel


class AccountCreateRequest(RequestModel):
    """Request body for POST /api/accounts."""
    name: str = Field(min_length=1, max_length=100)
    type: Literal["checking", "savings"] = Field(
        default="checking",
        description="Type of account to open",
    )
    initial_deposit: NonNegativeAmount = Field(
        default=Decimal("0"),
        description="Opening balance, recorded as a credit ledger entry",
    )


class AccountResponse(ResponseModel):
    """Public representation of an account."""
    id: uuid.UUID
    user_id: uuid.UUID
    name: str
    account_number: str
    balance: Decimal
    type: str
    created_at: datetime


class BalanceResponse(ResponseModel):
    """
    Balance check response: stored balance vs. balance computed from the ledger.

    `match` is False only if the stored balance disagrees with the sum of
    the account's ledger entries, which would indicate a data integrity
    issue.
    """
    account_id: uuid.UUID
    balance: Decimal
    computed_balance: Decimal
    match: bool
