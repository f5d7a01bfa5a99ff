"""
Authentication service: registration and login business logic.

This module contains the core auth logic, separated from HTTP concerns.
The router calls these functions and translates the results into HTTP
responses, so the logic can be tested without spinning up a web server.

Register flow:
  1. Check that username and email are not already registered (a request
     that loses a race with another registration trips the unique
     constraint instead, and gets the same DuplicateUserError)
  2. Hash the password with Argon2id
  3. Create the User
  4. Return a JWT token so the user is immediately logged in

Login flow:
  1. Look up user by username
  2. Verify password against stored hash
  3. Return a JWT token

Security notes:
  - Passwords are hashed before storage (never stored in plaintext)
  - Login returns the same error for "wrong password" and "unknown user"
    to prevent user enumeration
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.exceptions import DuplicateUserError, InvalidCredentialsError
from app.models.user import User
from app.security import hash_password, verify_password, create_access_token

logger = logging.getLogger(__name__)


async def _check_available(db: AsyncSession, username: str, email: str) -> None:
    result = await db.execute(select(User).where(User.username == username))
    if result.scalar_one_or_none():
        raise DuplicateUserError("username", username)

    result = await db.execute(select(User).where(User.email == email))
    if result.scalar_one_or_none():
        raise DuplicateUserError("email", email)


async def register(
    db: AsyncSession,
    settings: Settings,
    username: str,
    email: str,
    name: str,
    password: str,
) -> tuple[User, str]:
    """
    Register a new user.

    Returns:
        Tuple of (User instance, JWT token string).

    Raises:
        DuplicateUserError: If the username or email is already registered.
    """
    await _check_available(db, username, email)

    user = User(
        username=username,
        email=email,
        name=name,
        hashed_password=hash_password(password),
    )
    db.add(user)
    # Flush to get user.id assigned (needed for the token subject)
    try:
        await db.flush()
    except IntegrityError as exc:
        # Both SQLite and PostgreSQL name the violated column or constraint
        if "email" in str(exc.orig):
            raise DuplicateUserError("email", email) from exc
        raise DuplicateUserError("username", username) from exc

    logger.info("Registered user %s", user.id)

    # "sub" (subject) is the standard claim for user identity
    token = create_access_token(data={"sub": str(user.id)}, settings=settings)
    return user, token


async def login(
    db: AsyncSession,
    settings: Settings,
    username: str,
    password: str,
) -> tuple[User, str]:
    """
    Authenticate a user and return a JWT token.

    Raises:
        InvalidCredentialsError: If the user doesn't exist, is deactivated,
                                 or the password is wrong.
    """
    result = await db.execute(select(User).where(User.username == username))
    user = result.scalar_one_or_none()

    # Same error for every case, prevents user enumeration
    if not user:
        raise InvalidCredentialsError()

    if not verify_password(password, user.hashed_password):
        raise InvalidCredentialsError()

    if not user.is_active:
        raise InvalidCredentialsError()

    token = create_access_token(data={"sub": str(user.id)}, settings=settings)
    return user, token
