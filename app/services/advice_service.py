"""
Advice service: financial advice from a summarized view of the user's data.

Flow for one request:
  1. load_context() gathers the user's accounts, ledger, goals and journal
  2. summarize_context() computes, locally:
       - total balance across accounts
       - top 3 spending categories by summed debit amount
       - progress percentage of every savings goal
       - dominant mood over the 5 most recent journal entries
  3. build_prompt() turns the summary and the question into a prompt
  4. the AdviceClient returns a JSON object:
       {"message": str, "suggestedActions": [str], "emotionalSupport": str}
  5. render_advice_html() renders it into a fixed HTML template
  6. request_advice() stores the query and the rendered response

If step 4 or 5 fails for any reason, the user gets APOLOGY instead of an
error, so the chat stays usable while the model is unreachable.
"""

import html
import logging
import uuid
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.advice_client import AdviceClient
from app.models.account import Account
from app.models.advice import AiAdvice
from app.models.goal import SavingGoal
from app.models.journal import JournalEntry, Mood
from app.models.transaction import Transaction
from app.models.user import User
from app.money import from_cents
from app.services import account_service, goal_service, journal_service, transaction_service

logger = logging.getLogger(__name__)

APOLOGY = (
    "I'm sorry, I wasn't able to provide financial advice at this moment. "
    "Please try again later."
)

TOP_CATEGORY_COUNT = 3
MOOD_WINDOW = 5


@dataclass
class FinancialContext:
    """The user's data the advice is based on. Ledger and journal are newest first."""
    accounts: list[Account] = field(default_factory=list)
    transactions: list[Transaction] = field(default_factory=list)
    goals: list[SavingGoal] = field(default_factory=list)
    journal_entries: list[JournalEntry] = field(default_factory=list)


@dataclass
class GoalProgress:
    name: str
    target_amount: Decimal
    current_amount: Decimal
    progress_percentage: float
    deadline: datetime | None = None


@dataclass
class ContextSummary:
    total_balance: Decimal
    top_categories: list[tuple[str, Decimal]]
    goals: list[GoalProgress]
    dominant_mood: str


# ---------------------------------------------------------------------------
# Local summaries
# ---------------------------------------------------------------------------

def total_balance(accounts: list[Account]) -> Decimal:
    return from_cents(sum(account.balance_cents for account in accounts))


def top_spending_categories(
    transactions: list[Transaction],
    count: int = TOP_CATEGORY_COUNT,
) -> list[tuple[str, Decimal]]:
    """Categories with the largest summed debit amount, largest first.

    Credits and uncategorized debits are ignored.
    """
    spending: Counter[str] = Counter()
    for txn in transactions:
        if txn.type == "debit" and txn.category:
            spending[txn.category] += txn.amount_cents
    return [(category, from_cents(cents)) for category, cents in spending.most_common(count)]


def goal_progress(goals: list[SavingGoal]) -> list[GoalProgress]:
    return [
        GoalProgress(
            name=goal.name,
            target_amount=goal.target_amount,
            current_amount=goal.current_amount,
            progress_percentage=goal.progress_percentage,
            deadline=goal.deadline,
        )
        for goal in goals
    ]


def dominant_mood(
    journal_entries: list[JournalEntry],
    window: int = MOOD_WINDOW,
) -> str:
    """
    Most frequent mood among the `window` most recent entries.

    Ties go to the mood encountered first (i.e. the most recent of the tied
    moods, since entries are newest first). No entries means "neutral".
    """
    recent = [entry.mood for entry in journal_entries[:window]]
    if not recent:
        return Mood.NEUTRAL.value
    # most_common() orders equal counts by first occurrence
    mood, _ = Counter(recent).most_common(1)[0]
    return mood


def summarize_context(context: FinancialContext) -> ContextSummary:
    return ContextSummary(
        total_balance=total_balance(context.accounts),
        top_categories=top_spending_categories(context.transactions),
        goals=goal_progress(context.goals),
        dominant_mood=dominant_mood(context.journal_entries),
    )


# ---------------------------------------------------------------------------
# Prompt and rendering
# ---------------------------------------------------------------------------

def build_prompt(user_name: str, query: str, summary: ContextSummary) -> str:
    categories = ", ".join(
        f"{category} (${amount})" for category, amount in summary.top_categories
    ) or "none recorded"
    goals = ", ".join(
        f"{goal.name} ({goal.progress_percentage:.1f}% complete, "
        f"${goal.current_amount} of ${goal.target_amount})"
        for goal in summary.goals
    ) or "none"

    return f"""You are a compassionate and intelligent financial advisor for NeuroBank, a financial wellness platform.
You're helping {user_name} with their finances.

User's question: "{query}"

USER FINANCIAL CONTEXT:
- Total account balance: ${summary.total_balance}
- Recent emotional state: {summary.dominant_mood}
- Top spending categories: {categories}
- Savings goals: {goals}

Please provide personalized financial advice based on the user's question and financial context.
Your response should be:
1. Empathetic and considerate of their emotional state
2. Specific to their financial situation
3. Actionable with clear next steps
4. Supportive and encouraging
5. Concise yet thorough

If the query relates to mental wellness, emphasize the connection between financial and emotional wellbeing.

Respond in JSON format with the following structure:
{{
  "message": "Your main response message",
  "suggestedActions": ["1-3 specific actionable steps"],
  "emotionalSupport": "A supportive statement based on their mood"
}}"""


def render_advice_html(payload: dict) -> str:
    """
    Render the model's JSON answer into the chat HTML template.

    Raises:
        ValueError: If the payload is missing a field or has the wrong shape.
    """
    message = payload.get("message")
    actions = payload.get("suggestedActions")
    support = payload.get("emotionalSupport")

    if not isinstance(message, str) or not isinstance(support, str):
        raise ValueError("Advice payload needs string 'message' and 'emotionalSupport'")
    if not isinstance(actions, list) or not all(isinstance(a, str) for a in actions):
        raise ValueError("Advice payload needs a list of strings in 'suggestedActions'")

    items = "".join(f"<li>{html.escape(action)}</li>" for action in actions)
    return (
        f"<p>{html.escape(message)}</p>"
        "<p><strong>Suggested actions:</strong></p>"
        f"<ul>{items}</ul>"
        f"<p><em>{html.escape(support)}</em></p>"
    )


async def generate_financial_advice(
    user: User,
    query: str,
    context: FinancialContext,
    client: AdviceClient,
) -> str:
    """Return rendered advice HTML, or APOLOGY if generation fails."""
    summary = summarize_context(context)
    prompt = build_prompt(user.name, query, summary)
    try:
        payload = await client.complete_json(prompt)
        return render_advice_html(payload)
    except Exception:
        logger.exception("Advice generation failed for user %s", user.id)
        return APOLOGY


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------

async def load_context(db: AsyncSession, user_id: uuid.UUID) -> FinancialContext:
    return FinancialContext(
        accounts=await account_service.get_accounts(db, user_id),
        transactions=await transaction_service.get_user_transactions(db, user_id, limit=None),
        goals=await goal_service.get_goals(db, user_id),
        journal_entries=await journal_service.get_entries(db, user_id, limit=MOOD_WINDOW),
    )


async def request_advice(
    db: AsyncSession,
    user: User,
    query: str,
    client: AdviceClient,
) -> AiAdvice:
    """
    Generate advice for a question and store the exchange.

    The read transaction that built the context is committed before the
    model call, and the advice record is written in a fresh one.
    """
    context = await load_context(db, user.id)
    # Release the connection (and any locks) while the model is thinking
    await db.commit()

    response = await generate_financial_advice(user, query, context, client)

    advice = AiAdvice(user_id=user.id, query=query, response=response)
    db.add(advice)
    await db.flush()
    return advice


async def get_advice_history(db: AsyncSession, user_id: uuid.UUID) -> list[AiAdvice]:
    """A user's advice records, newest first."""
    result = await db.execute(
        select(AiAdvice)
        .where(AiAdvice.user_id == user_id)
        .order_by(AiAdvice.date.desc())
    )
    return list(result.scalars().all())
