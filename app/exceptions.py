"""
Custom exception classes and FastAPI exception handlers.

Why custom exceptions?
  FastAPI's default HTTPException works, but custom exceptions let the
  service layer raise domain-specific errors (like InsufficientFundsError)
  without importing HTTP concepts. The handler layer then translates
  these into proper HTTP responses.

  This separation means:
    - Service code is testable without HTTP
    - Error responses are consistent across all endpoints
    - Adding new error types is straightforward

Exception hierarchy:
    NeuroBankError (base)
    ├── InvalidAmountError        amount <= 0 or finer than one cent
    ├── SameAccountTransferError  transfer source == destination
    ├── InsufficientFundsError    transfer larger than the source balance
    ├── AccountNotFoundError      requested account doesn't exist
    ├── GoalNotFoundError         requested savings goal doesn't exist
    ├── UnauthorizedAccessError   user trying to access another's resource
    ├── DuplicateUserError        username or email already registered
    └── InvalidCredentialsError   bad username/password at login

Status mapping:
  Validation and business-rule failures are 400, ownership failures 403,
  bad credentials 401, duplicates 409. Storage failures (including
  serialization conflicts between concurrent transfers) are a generic 500;
  nothing is retried.
"""

import logging
import uuid
from decimal import Decimal

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Base exception
# ---------------------------------------------------------------------------

class NeuroBankError(Exception):
    """Base exception for all NeuroBank domain errors."""

    def __init__(self, detail: str = "An error occurred"):
        self.detail = detail
        super().__init__(self.detail)


# ---------------------------------------------------------------------------
# Domain exceptions
# ---------------------------------------------------------------------------

class InvalidAmountError(NeuroBankError):
    """Raised when a monetary amount is not positive or has sub-cent precision."""

    def __init__(self, amount):
        self.amount = amount
        super().__init__(
            f"Invalid amount {amount}: must be positive with at most two decimal places"
        )


class SameAccountTransferError(NeuroBankError):
    """Raised when a transfer names the same account as source and destination."""

    def __init__(self, account_id: uuid.UUID):
        self.account_id = account_id
        super().__init__("Cannot transfer to the same account")


class InsufficientFundsError(NeuroBankError):
    """
    Raised when a transfer would take more than the source account holds.

    Attributes:
        account_id: The account that lacks sufficient funds.
        requested: The amount the user tried to move.
        available: The current balance of the account.
    """

    def __init__(
        self,
        account_id: uuid.UUID,
        requested: Decimal,
        available: Decimal,
    ):
        self.account_id = account_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient funds: requested {requested}, available {available}"
        )


class AccountNotFoundError(NeuroBankError):
    """Raised when a requested account does not exist."""

    def __init__(self, account_id: uuid.UUID):
        self.account_id = account_id
        super().__init__(f"Account {account_id} not found")


class GoalNotFoundError(NeuroBankError):
    """Raised when a requested savings goal does not exist."""

    def __init__(self, goal_id: uuid.UUID):
        self.goal_id = goal_id
        super().__init__(f"Goal {goal_id} not found")


class UnauthorizedAccessError(NeuroBankError):
    """Raised when a user attempts to access a resource they don't own."""

    def __init__(self, detail: str = "You do not have access to this resource"):
        super().__init__(detail)


class DuplicateUserError(NeuroBankError):
    """Raised when registering with a username or email that's already in use."""

    def __init__(self, field: str, value: str):
        self.field = field
        self.value = value
        super().__init__(f"{field.capitalize()} {value} is already registered")


class InvalidCredentialsError(NeuroBankError):
    """Raised when login credentials are incorrect."""

    def __init__(self):
        super().__init__("Invalid username or password")


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

# Domain errors that only need a status code and an error_type tag
_SIMPLE_ERRORS: list[tuple[type[NeuroBankError], int, str]] = [
    (InvalidAmountError, 400, "invalid_amount"),
    (SameAccountTransferError, 400, "same_account_transfer"),
    (AccountNotFoundError, 400, "account_not_found"),
    (GoalNotFoundError, 400, "goal_not_found"),
    (UnauthorizedAccessError, 403, "unauthorized_access"),
    (DuplicateUserError, 409, "duplicate_user"),
    (InvalidCredentialsError, 401, "invalid_credentials"),
]


def _simple_handler(status_code: int, error_type: str):
    async def handler(request: Request, exc: NeuroBankError) -> JSONResponse:
        return JSONResponse(
            status_code=status_code,
            content={"detail": exc.detail, "error_type": error_type},
        )
    return handler


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register custom exception handlers with the FastAPI application.

    Each handler maps an exception to an HTTP status code and a consistent
    JSON response format: {"detail": "error message", "error_type": "..."}

    This is called once by the application factory in main.py.
    """
    for exc_class, status_code, error_type in _SIMPLE_ERRORS:
        app.add_exception_handler(exc_class, _simple_handler(status_code, error_type))

    @app.exception_handler(InsufficientFundsError)
    async def insufficient_funds_handler(
        request: Request, exc: InsufficientFundsError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={
                "detail": exc.detail,
                "error_type": "insufficient_funds",
                "requested": str(exc.requested),
                "available": str(exc.available),
            },
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        # Malformed, missing or unexpected fields are a client error (400),
        # the same class of failure as a business-rule rejection.
        return JSONResponse(
            status_code=400,
            content=jsonable_encoder({
                "detail": "Request validation failed",
                "error_type": "validation_error",
                "errors": exc.errors(),
            }),
        )

    @app.exception_handler(DBAPIError)
    async def storage_error_handler(
        request: Request, exc: DBAPIError
    ) -> JSONResponse:
        # The request's session has already been rolled back by get_db().
        logger.exception("Storage failure on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"detail": "The operation could not be completed", "error_type": "storage_error"},
        )
