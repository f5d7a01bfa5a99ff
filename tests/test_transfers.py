"""
Tests for transfer operations.

THIS IS THE MOST CRITICAL TEST FILE. Transfers move money between accounts,
and any bug here could mean money is created or destroyed.

These tests verify:
  - Successful transfers update both balances correctly
  - Each transfer creates a debit and a credit ledger entry
  - Insufficient funds are rejected with no state change
  - Transfers to the same account are rejected
  - Zero, negative and sub-cent amounts are rejected
  - Repeated transfers each apply independently
  - Transfers involving another user's account are refused
"""

import pytest
import pytest_asyncio


async def _open_account(client, name, deposit):
    response = await client.post(
        "/api/accounts",
        json={"name": name, "initialDeposit": deposit},
    )
    assert response.status_code == 201
    return response.json()


async def _balance(client, account_id):
    response = await client.get(f"/api/accounts/{account_id}/balance")
    assert response.status_code == 200
    return response.json()["balance"]


async def _ledger(client, account_id):
    response = await client.get(f"/api/accounts/{account_id}/transactions")
    return response.json()


async def _transfer(client, from_id, to_id, amount, description="rent"):
    return await client.post(
        "/api/transfer",
        json={
            "fromAccountId": from_id,
            "toAccountId": to_id,
            "amount": amount,
            "description": description,
        },
    )


@pytest_asyncio.fixture
async def two_accounts(authenticated_client):
    """Checking with 100.00 and savings with 50.00, owned by the same user."""
    source = await _open_account(authenticated_client, "Checking", "100.00")
    dest = await _open_account(authenticated_client, "Savings", "50.00")
    return source, dest


class TestSuccessfulTransfer:

    async def test_transfer_moves_money(self, authenticated_client, two_accounts):
        source, dest = two_accounts

        response = await _transfer(authenticated_client, source["id"], dest["id"], "30.00")
        assert response.status_code == 201

        assert await _balance(authenticated_client, source["id"]) == "70.00"
        assert await _balance(authenticated_client, dest["id"]) == "80.00"

    async def test_transfer_returns_both_legs(self, authenticated_client, two_accounts):
        source, dest = two_accounts

        response = await _transfer(authenticated_client, source["id"], dest["id"], "30.00")
        data = response.json()

        debit = data["sourceTransaction"]
        credit = data["targetTransaction"]
        assert debit["type"] == "debit"
        assert debit["accountId"] == source["id"]
        assert debit["amount"] == "30.00"
        assert debit["description"] == "Transfer: rent"
        assert debit["category"] == "Transfer"
        assert debit["merchant"] == "NeuroBank"

        assert credit["type"] == "credit"
        assert credit["accountId"] == dest["id"]
        assert credit["amount"] == "30.00"
        assert credit["description"] == f"Transfer from account {source['accountNumber'][-4:]}"

    async def test_transfer_recorded_in_both_ledgers(self, authenticated_client, two_accounts):
        source, dest = two_accounts
        await _transfer(authenticated_client, source["id"], dest["id"], "30.00")

        source_ledger = await _ledger(authenticated_client, source["id"])
        dest_ledger = await _ledger(authenticated_client, dest["id"])
        # Opening deposit + transfer leg on each side
        assert len(source_ledger) == 2
        assert len(dest_ledger) == 2
        assert source_ledger[0]["description"] == "Transfer: rent"
        assert dest_ledger[0]["type"] == "credit"

    async def test_entire_balance_can_be_moved(self, authenticated_client, two_accounts):
        source, dest = two_accounts

        response = await _transfer(authenticated_client, source["id"], dest["id"], "100.00")
        assert response.status_code == 201
        assert await _balance(authenticated_client, source["id"]) == "0.00"
        assert await _balance(authenticated_client, dest["id"]) == "150.00"

    async def test_repeated_transfers_apply_independently(self, authenticated_client, two_accounts):
        source, dest = two_accounts

        for _ in range(3):
            response = await _transfer(authenticated_client, source["id"], dest["id"], "30.00")
            assert response.status_code == 201

        assert await _balance(authenticated_client, source["id"]) == "10.00"
        assert await _balance(authenticated_client, dest["id"]) == "140.00"
        assert len(await _ledger(authenticated_client, source["id"])) == 4

    async def test_total_money_is_conserved(self, authenticated_client, two_accounts):
        source, dest = two_accounts
        await _transfer(authenticated_client, source["id"], dest["id"], "12.34")
        await _transfer(authenticated_client, dest["id"], source["id"], "0.01")

        accounts = (await authenticated_client.get("/api/accounts")).json()
        assert sum(float(a["balance"]) for a in accounts) == pytest.approx(150.00)

        for account in (source, dest):
            balance = await authenticated_client.get(f"/api/accounts/{account['id']}/balance")
            assert balance.json()["match"] is True


class TestRejectedTransfer:

    async def test_insufficient_funds(self, authenticated_client, two_accounts):
        source, dest = two_accounts

        response = await _transfer(authenticated_client, source["id"], dest["id"], "100.01")
        assert response.status_code == 400
        data = response.json()
        assert data["error_type"] == "insufficient_funds"
        assert data["requested"] == "100.01"
        assert data["available"] == "100.00"

        # Nothing changed, nothing recorded
        assert await _balance(authenticated_client, source["id"]) == "100.00"
        assert await _balance(authenticated_client, dest["id"]) == "50.00"
        assert len(await _ledger(authenticated_client, source["id"])) == 1
        assert len(await _ledger(authenticated_client, dest["id"])) == 1

    async def test_same_account_rejected(self, authenticated_client, two_accounts):
        source, _ = two_accounts

        response = await _transfer(authenticated_client, source["id"], source["id"], "10.00")
        assert response.status_code == 400
        assert await _balance(authenticated_client, source["id"]) == "100.00"

    @pytest.mark.parametrize("amount", ["0", "-5.00", "0.001"])
    async def test_invalid_amount_rejected(self, authenticated_client, two_accounts, amount):
        source, dest = two_accounts

        response = await _transfer(authenticated_client, source["id"], dest["id"], amount)
        assert response.status_code == 400
        assert await _balance(authenticated_client, source["id"]) == "100.00"
        assert await _balance(authenticated_client, dest["id"]) == "50.00"

    async def test_missing_description_rejected(self, authenticated_client, two_accounts):
        source, dest = two_accounts
        response = await authenticated_client.post(
            "/api/transfer",
            json={"fromAccountId": source["id"], "toAccountId": dest["id"], "amount": "1.00"},
        )
        assert response.status_code == 400

    async def test_unknown_destination_rejected(self, authenticated_client, two_accounts):
        source, _ = two_accounts

        response = await _transfer(
            authenticated_client, source["id"], "00000000-0000-0000-0000-000000000000", "10.00",
        )
        assert response.status_code == 403
        assert await _balance(authenticated_client, source["id"]) == "100.00"

    async def test_other_users_account_rejected(
        self, authenticated_client, second_authenticated_client, two_accounts,
    ):
        source, _ = two_accounts
        stranger = await _open_account(second_authenticated_client, "Theirs", "20.00")

        # Pushing money into someone else's account
        response = await _transfer(authenticated_client, source["id"], stranger["id"], "10.00")
        assert response.status_code == 403

        # Pulling money out of someone else's account
        response = await _transfer(authenticated_client, stranger["id"], source["id"], "10.00")
        assert response.status_code == 403

        assert await _balance(authenticated_client, source["id"]) == "100.00"
        assert await _balance(second_authenticated_client, stranger["id"]) == "20.00"
