"""
Tests for exact monetary precision: no floating point anywhere.

Balances are stored as integer cents and cross the API as two-place
decimal strings. Floating point representations of money cause rounding
errors (0.1 + 0.2 = 0.30000000000000004); integer cents guarantee exact
arithmetic.

Tests verify:
  - Every amount in a response is a decimal string with two places
  - Large values work correctly
  - Repeated small transactions don't accumulate rounding errors
  - Sub-cent amounts are rejected rather than rounded
  - Stored balance = exact sum of the ledger
"""

from decimal import Decimal

import pytest

from app.money import from_cents, to_cents


async def _open_account(client):
    response = await client.post("/api/accounts", json={"name": "Precision"})
    return response.json()["id"]


async def _record(client, account_id, amount, txn_type="credit"):
    return await client.post(
        "/api/transactions",
        json={"accountId": account_id, "amount": amount, "type": txn_type, "description": "p"},
    )


class TestDecimalPrecision:
    """Monetary operations are exact to the cent."""

    async def test_amounts_are_two_place_strings(self, authenticated_client):
        account_id = await _open_account(authenticated_client)

        txn = await _record(authenticated_client, account_id, 10.5)
        assert txn.json()["amount"] == "10.50"

        balance = (await authenticated_client.get(f"/api/accounts/{account_id}/balance")).json()
        assert balance["balance"] == "10.50"
        assert balance["computedBalance"] == "10.50"

    async def test_large_values(self, authenticated_client):
        account_id = await _open_account(authenticated_client)

        await _record(authenticated_client, account_id, "1000000.00")
        await _record(authenticated_client, account_id, "999999.99", "debit")

        balance = await authenticated_client.get(f"/api/accounts/{account_id}/balance")
        assert balance.json()["balance"] == "0.01"

    async def test_no_rounding_errors_with_repeated_small_transactions(self, authenticated_client):
        """One cent, a hundred times, is exactly one dollar."""
        account_id = await _open_account(authenticated_client)

        for _ in range(100):
            await _record(authenticated_client, account_id, "0.01")

        balance = await authenticated_client.get(f"/api/accounts/{account_id}/balance")
        assert balance.json()["balance"] == "1.00"
        assert balance.json()["match"] is True

    async def test_tenths_add_exactly(self, authenticated_client):
        account_id = await _open_account(authenticated_client)
        await _record(authenticated_client, account_id, "0.10")
        await _record(authenticated_client, account_id, "0.20")

        balance = await authenticated_client.get(f"/api/accounts/{account_id}/balance")
        assert balance.json()["balance"] == "0.30"

    async def test_sub_cent_amount_rejected(self, authenticated_client):
        account_id = await _open_account(authenticated_client)

        response = await _record(authenticated_client, account_id, "0.005")
        assert response.status_code == 400

        balance = await authenticated_client.get(f"/api/accounts/{account_id}/balance")
        assert balance.json()["balance"] == "0.00"


class TestMoneyHelpers:

    @pytest.mark.parametrize(
        "amount, cents",
        [(Decimal("30.00"), 3000), (Decimal("0.01"), 1), ("12.5", 1250), (7, 700)],
    )
    def test_to_cents(self, amount, cents):
        assert to_cents(amount) == cents

    @pytest.mark.parametrize("amount", [Decimal("0.001"), "1.234", "NaN", "Infinity", "abc"])
    def test_to_cents_rejects(self, amount):
        with pytest.raises(ValueError):
            to_cents(amount)

    def test_from_cents_has_two_places(self):
        assert str(from_cents(1050)) == "10.50"
        assert str(from_cents(0)) == "0.00"
        assert str(from_cents(-1500)) == "-15.00"
