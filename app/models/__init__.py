"""
SQLAlchemy ORM models package.

All models are imported here so that:
  1. Base.metadata knows every table before create_all() runs
  2. Other modules can import from app.models directly
"""

from app.models.user import User  # noqa: F401
from app.models.account import Account  # noqa: F401
from app.models.transaction import Transaction  # noqa: F401
from app.models.goal import SavingGoal  # noqa: F401
from app.models.journal import JournalEntry, Mood  # noqa: F401
from app.models.advice import AiAdvice  # noqa: F401
