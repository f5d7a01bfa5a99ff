"""
Authentication router: register, login and current-user endpoints.

Register and login are the only public (unauthenticated) endpoints in the
API besides the health check. Everything else requires a valid JWT token.

Endpoints:
  POST /api/register  Create a user and get a token
  POST /api/login     Authenticate and get a token
  GET  /api/user      The authenticated user's profile

Security notes:
  - Plaintext passwords exist only in memory during request processing;
    they are hashed before any database operation and never logged.
  - JWT tokens appear only in response bodies, which are not logged.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.database import get_db
from app.dependencies import get_current_user, get_settings
from app.models.user import User
from app.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    TokenResponse,
    RegisterResponse,
)
from app.schemas.user import UserResponse
from app.services import auth_service

router = APIRouter()


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
async def register(
    request: RegisterRequest,
    settings: Settings = Depends(get_settings),
    db: AsyncSession = Depends(get_db),
):
    """
    Register a new user and log them in.

    - **username**: 3-50 characters, must not be registered yet
    - **email**: Must be a valid email format and not registered yet
    - **name**: Display name
    - **password**: Minimum 8 characters
    """
    user, token = await auth_service.register(
        db=db,
        settings=settings,
        username=request.username,
        email=request.email,
        name=request.name,
        password=request.password,
    )
    await db.commit()

    return RegisterResponse(user=UserResponse.model_validate(user), token=token)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Authenticate and get a token",
)
async def login(
    request: LoginRequest,
    settings: Settings = Depends(get_settings),
    db: AsyncSession = Depends(get_db),
):
    """
    Authenticate with username and password.

    Returns a JWT bearer token that must be included in the Authorization
    header for all subsequent requests:

        Authorization: Bearer <token>
    """
    _, token = await auth_service.login(
        db=db,
        settings=settings,
        username=request.username,
        password=request.password,
    )

    return TokenResponse(token=token)


@router.get(
    "/user",
    response_model=UserResponse,
    summary="Get the current user",
)
async def current_user(user: User = Depends(get_current_user)):
    return user
