"""
Pydantic schemas for User-related responses.

hashed_password is NEVER included in any response schema.
"""

import uuid
from datetime import datetime

from app.schemas.base import ResponseModel


class UserResponse(ResponseModel):
    """Public representation of a User (never includes password hash)."""
    id: uuid.UUID
    username: str
    email: str
    name: str
    created_at: datetime
