"""
Shared base classes and field types for the API schemas.

Wire format:
  Field names are camelCase on the wire ("fromAccountId") and snake_case in
  Python (from_account_id). Response models serialize by alias, which
  FastAPI does by default.

Strictness:
  Request bodies reject unknown fields (extra="forbid"). A misspelled or
  unexpected key is a 400 rather than being silently ignored.

Money:
  Amounts are Decimals with at most two fractional digits. They accept a
  JSON number or a decimal string ("30.00") and serialize as strings, so
  no binary float ever carries a balance.
"""

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


PositiveAmount = Annotated[
    Decimal,
    Field(gt=0, max_digits=14, decimal_places=2, description="Positive amount, at most 2 decimal places"),
]

NonNegativeAmount = Annotated[
    Decimal,
    Field(ge=0, max_digits=14, decimal_places=2),
]


class RequestModel(BaseModel):
    """Base for request bodies: camelCase aliases, unknown fields rejected."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class ResponseModel(BaseModel):
    """Base for response bodies: built from ORM objects, emitted in camelCase."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
