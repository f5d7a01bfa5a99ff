"""
Money helpers: conversion between decimal amounts and integer cents.

Amounts cross the API boundary as Decimal values with at most two
fractional digits ("30.00", 30, "0.5"). They are stored as integer cents
so that balance arithmetic is exact: 0.10 + 0.20 is 10 + 20 = 30 cents,
never 0.30000000000000004.
"""

from decimal import Decimal, InvalidOperation

CENT = Decimal("0.01")


def to_cents(amount: Decimal | int | str) -> int:
    """
    Convert a decimal amount to integer cents.

    Raises:
        ValueError: If the value is not a finite number or has more than
                    two fractional digits (sub-cent amounts are rejected,
                    never rounded).
    """
    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        raise ValueError(f"Not a decimal amount: {amount!r}")

    if not value.is_finite():
        raise ValueError(f"Not a finite amount: {amount!r}")

    cents = value * 100
    if cents != cents.to_integral_value():
        raise ValueError(f"Amount {amount} has more than two decimal places")

    return int(cents)


def from_cents(cents: int) -> Decimal:
    """Convert integer cents to a Decimal with exactly two places (1050 -> 10.50)."""
    return (Decimal(cents) / 100).quantize(CENT)
