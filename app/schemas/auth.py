"""
Pydantic schemas for authentication endpoints (register and login).

These schemas define the request/response contracts for the auth API.
Pydantic validates incoming data automatically: if a required field is
missing or the wrong type, the request is rejected with 400 before our
code even runs.
"""

from pydantic import EmailStr, Field

from app.schemas.base import RequestModel, ResponseModel
from app.schemas.user import UserResponse


class RegisterRequest(RequestModel):
    """Request body for POST /api/register."""
    username: str = Field(min_length=3, max_length=50)
    email: EmailStr                                # Validates email format
    name: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=8)            # Minimum 8 characters


class LoginRequest(RequestModel):
    """Request body for POST /api/login."""
    username: str
    password: str


class TokenResponse(ResponseModel):
    """Response body for successful login: contains the JWT."""
    token: str
    token_type: str = "bearer"


class RegisterResponse(ResponseModel):
    """Response body for successful registration: the new user + JWT."""
    user: UserResponse
    token: str
    token_type: str = "bearer"
