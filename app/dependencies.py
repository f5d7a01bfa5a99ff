"""
FastAPI dependencies for configuration, authentication and collaborators.

Dependencies are reusable functions that FastAPI injects into route
handlers. Everything they hand out lives on app.state, put there by the
application factory:

  get_settings       (Request -> Settings)
  get_advice_client  (Request -> AdviceClient)
  get_current_user   (JWT -> User), chained on get_settings and get_db

Every protected endpoint declares get_current_user as a parameter. FastAPI
calls the dependency first, and if it fails (missing, expired or tampered
token, or a deactivated user) the request is rejected with 401 before the
route handler runs. Resource ownership is then checked by the services.
"""

import uuid

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.advice_client import AdviceClient
from app.config import Settings
from app.database import get_db
from app.models.user import User
from app.security import decode_access_token


# OAuth2PasswordBearer tells FastAPI where to look for the token:
# the "Authorization: Bearer <token>" header.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/login")


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_advice_client(request: Request) -> AdviceClient:
    return request.app.state.advice_client


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    settings: Settings = Depends(get_settings),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Extract and validate the JWT token, then return the corresponding User.

    Raises:
        HTTPException 401: If the token is invalid or the user doesn't exist
                           or is deactivated.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = decode_access_token(token, settings)
        user_id_str: str | None = payload.get("sub")
        if user_id_str is None:
            raise credentials_exception
        user_id = uuid.UUID(user_id_str)
    except (JWTError, ValueError):
        raise credentials_exception

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if user is None or not user.is_active:
        raise credentials_exception

    return user
