#!/usr/bin/env python3
"""
Demo seed script: populates a running server with sample data for demos.

!! NOT FOR PRODUCTION !!
This script creates test users with known passwords and fake ledger,
goal and journal data. It is intended ONLY for local demos and frontend
development. Everything goes through the public API, so the data obeys
the same rules as real traffic.

Usage:
    # With the API server running on localhost:8000:
    python demo/seed.py

    # Reset the database and re-seed:
    python demo/seed.py --reset

    # Custom server URL:
    python demo/seed.py --base-url http://localhost:9000

Login credentials after seeding:
    ┌──────────────┬───────────────────┐
    │ Username     │ Password          │
    ├──────────────┼───────────────────┤
    │ alice        │ AliceDemo123!     │
    │ bob          │ BobDemo123!       │
    │ carol        │ CarolDemo123!     │
    └──────────────┴───────────────────┘
"""

import argparse
import asyncio
import os
import random
import sys

import httpx

BASE_URL = "http://localhost:8000"

# ---------------------------------------------------------------------------
# Demo users
# ---------------------------------------------------------------------------

USERS = [
    {
        "username": "alice",
        "email": "alice.chen@example.com",
        "password": "AliceDemo123!",
        "name": "Alice Chen",
        "accounts": [
            {"name": "Everyday Checking", "type": "checking", "initial_deposit": "850.00"},
            {"name": "Rainy Day Savings", "type": "savings", "initial_deposit": "5000.00"},
        ],
        "goals": [
            {"name": "Emergency fund", "target": "10000.00", "funded": "5000.00"},
            {"name": "New laptop", "target": "1500.00", "funded": "1500.00"},
        ],
    },
    {
        "username": "bob",
        "email": "bob.martinez@example.com",
        "password": "BobDemo123!",
        "name": "Bob Martinez",
        "accounts": [
            {"name": "Checking", "type": "checking", "initial_deposit": "1200.00"},
        ],
        "goals": [
            {"name": "Vacation", "target": "2500.00", "funded": "400.00"},
        ],
    },
    {
        "username": "carol",
        "email": "carol.nguyen@example.com",
        "password": "CarolDemo123!",
        "name": "Carol Nguyen",
        "accounts": [
            {"name": "Checking", "type": "checking", "initial_deposit": "3200.00"},
            {"name": "Savings", "type": "savings", "initial_deposit": "12000.00"},
        ],
        "goals": [],
    },
]

PURCHASES = [
    ("Coffee shop", "Dining", "Bean There"),
    ("Weekly groceries", "Groceries", "Fresh Mart"),
    ("Fuel", "Transport", "QuickGas"),
    ("Streaming subscription", "Entertainment", "StreamCo"),
    ("Dinner out", "Dining", "Luigi's"),
    ("Electricity bill", "Utilities", "City Power"),
    ("Phone bill", "Utilities", "TeleOne"),
    ("Bus pass", "Transport", "Metro"),
    ("Pharmacy", "Health", "CarePlus"),
    ("Movie tickets", "Entertainment", "Cineplex"),
]

JOURNAL = [
    ("Paid all my bills on time this month.", "happy"),
    ("Worried about the car repair costs.", "sad"),
    ("Normal week, nothing special.", "neutral"),
    ("Hit a savings milestone!", "very-happy"),
    ("Spent more on dining out than planned.", "sad"),
]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def log(msg: str) -> None:
    print(f"  {msg}")


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def dollars(cents: int) -> str:
    return f"{cents // 100}.{cents % 100:02d}"


async def register(client: httpx.AsyncClient, user: dict) -> str:
    """Register a user, return JWT token."""
    resp = await client.post(f"{BASE_URL}/api/register", json={
        "username": user["username"],
        "email": user["email"],
        "password": user["password"],
        "name": user["name"],
    })
    resp.raise_for_status()
    return resp.json()["token"]


async def create_account(client: httpx.AsyncClient, token: str, account: dict) -> dict:
    resp = await client.post(
        f"{BASE_URL}/api/accounts",
        json={
            "name": account["name"],
            "type": account["type"],
            "initialDeposit": account["initial_deposit"],
        },
        headers=auth_header(token),
    )
    resp.raise_for_status()
    return resp.json()


async def transact(client: httpx.AsyncClient, token: str, account_id: str,
                   txn_type: str, amount: str, description: str,
                   category: str | None = None, merchant: str | None = None) -> dict:
    resp = await client.post(
        f"{BASE_URL}/api/transactions",
        json={
            "accountId": account_id,
            "amount": amount,
            "type": txn_type,
            "description": description,
            "category": category,
            "merchant": merchant,
        },
        headers=auth_header(token),
    )
    resp.raise_for_status()
    return resp.json()


async def do_transfer(client: httpx.AsyncClient, token: str,
                      from_id: str, to_id: str, amount: str, description: str) -> httpx.Response:
    return await client.post(
        f"{BASE_URL}/api/transfer",
        json={
            "fromAccountId": from_id,
            "toAccountId": to_id,
            "amount": amount,
            "description": description,
        },
        headers=auth_header(token),
    )


async def create_goal(client: httpx.AsyncClient, token: str, goal: dict) -> None:
    resp = await client.post(
        f"{BASE_URL}/api/goals",
        json={"name": goal["name"], "targetAmount": goal["target"]},
        headers=auth_header(token),
    )
    resp.raise_for_status()
    resp = await client.patch(
        f"{BASE_URL}/api/goals/{resp.json()['id']}",
        json={"amount": goal["funded"]},
        headers=auth_header(token),
    )
    resp.raise_for_status()
    state = "completed" if resp.json()["completed"] else "in progress"
    log(f"  Goal '{goal['name']}': {goal['funded']} of {goal['target']} ({state})")


async def get_balance(client: httpx.AsyncClient, token: str, account_id: str) -> str:
    resp = await client.get(
        f"{BASE_URL}/api/accounts/{account_id}/balance",
        headers=auth_header(token),
    )
    resp.raise_for_status()
    return resp.json()["balance"]


# ---------------------------------------------------------------------------
# Seed logic
# ---------------------------------------------------------------------------

async def seed_history(client: httpx.AsyncClient, token: str, accounts: list[dict]) -> None:
    """A month of payroll and purchases on checking, plus a savings transfer."""
    checking = next((a for a in accounts if a["type"] == "checking"), None)
    savings = next((a for a in accounts if a["type"] == "savings"), None)
    if checking is None:
        return

    for _ in range(2):
        await transact(client, token, checking["id"], "credit",
                       dollars(random.randint(1_800_00, 3_200_00)), "Payroll deposit",
                       category="Income", merchant="Employer Inc.")

    for _ in range(random.randint(8, 15)):
        description, category, merchant = random.choice(PURCHASES)
        await transact(client, token, checking["id"], "debit",
                       dollars(random.randint(3_00, 120_00)), description,
                       category=category, merchant=merchant)

    if savings is not None:
        amount = dollars(random.randint(200_00, 800_00))
        resp = await do_transfer(client, token, checking["id"], savings["id"],
                                 amount, "Monthly savings")
        if resp.status_code == 201:
            log(f"  Transferred {amount} to savings")
        else:
            log(f"  Savings transfer declined: {resp.json()['detail']}")


async def seed(base_url: str) -> None:
    global BASE_URL
    BASE_URL = base_url

    print("\n========================================")
    print("  DEMO SEED: NOT FOR PRODUCTION")
    print("========================================\n")

    async with httpx.AsyncClient(timeout=30.0) as client:
        # Health check
        try:
            health = await client.get(f"{BASE_URL}/health")
            health.raise_for_status()
        except (httpx.ConnectError, httpx.HTTPStatusError):
            print(f"  ERROR: Cannot connect to {BASE_URL}")
            print("  Start the server first: uvicorn app.main:create_app --factory --reload\n")
            sys.exit(1)

        for user in USERS:
            print(f"\nCreating {user['name']}...")
            token = await register(client, user)
            log(f"Login: {user['username']} / {user['password']}")

            accounts = []
            for account_info in user["accounts"]:
                account = await create_account(client, token, account_info)
                accounts.append(account)
                log(f"  {account['type'].capitalize()} account {account['accountNumber']}: "
                    f"opened with {account['balance']}")

            await seed_history(client, token, accounts)

            for goal in user["goals"]:
                await create_goal(client, token, goal)

            for entry, mood in random.sample(JOURNAL, k=3):
                resp = await client.post(
                    f"{BASE_URL}/api/journal",
                    json={"entry": entry, "mood": mood},
                    headers=auth_header(token),
                )
                resp.raise_for_status()
            log("  3 journal entries written")

            for account in accounts:
                balance = await get_balance(client, token, account["id"])
                log(f"  {account['name']}: balance {balance}")

    # --- Summary ---
    print("\n========================================")
    print("  SEED COMPLETE: Login Credentials")
    print("========================================")
    print(f"\n  {'Username':<14s} {'Password':<20s}")
    print(f"  {'─' * 14} {'─' * 20}")
    for user in USERS:
        print(f"  {user['username']:<14s} {user['password']:<20s}")
    print()


def reset_database() -> None:
    """Delete the SQLite database file so the server recreates it on restart."""
    db_path = os.path.join(os.path.dirname(__file__), "..", "data", "neurobank.db")
    db_path = os.path.normpath(db_path)

    if os.path.exists(db_path):
        os.remove(db_path)
        print(f"\n  Deleted {db_path}")
        print("  Restart the server to recreate empty tables.\n")
    else:
        print(f"\n  No database found at {db_path}\n")


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

async def main() -> None:
    parser = argparse.ArgumentParser(
        description="Demo seed script: NOT FOR PRODUCTION",
        epilog="Creates sample users, accounts, transactions, goals and journal entries.",
    )
    parser.add_argument(
        "--base-url", default="http://localhost:8000",
        help="Base URL of the running API (default: http://localhost:8000)",
    )
    parser.add_argument(
        "--reset", action="store_true",
        help="Delete the database file and exit (restart server to recreate)",
    )
    args = parser.parse_args()

    if args.reset:
        reset_database()
        return

    await seed(args.base_url)


if __name__ == "__main__":
    asyncio.run(main())
