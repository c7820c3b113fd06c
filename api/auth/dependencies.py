"""
Authentication Dependencies

FastAPI dependencies resolving the authenticated user.
"""

import uuid
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from database.connection import get_db
from database.models import User
from api.auth.jwt import verify_token, TokenError
from api.middleware.error_handler import AuthenticationError, AuthorizationError


# OAuth2 scheme for token extraction
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token", auto_error=False)


async def get_current_user(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Resolve the user behind the bearer token.

    Raises:
        AuthenticationError: If the token is missing, invalid or expired,
            or its user no longer exists
    """
    if token is None:
        raise AuthenticationError("No token, authorization denied.")

    try:
        payload = verify_token(token, "access")
    except TokenError as e:
        raise AuthenticationError(str(e))

    try:
        user_id = uuid.UUID(payload.get("sub") or "")
    except ValueError:
        raise AuthenticationError("Token is not valid.")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if user is None:
        raise AuthenticationError("Token is not valid.")

    # Used by the rate limiter key function
    request.state.user_id = str(user.id)
    return user


async def get_current_active_user(
    current_user: User = Depends(get_current_user)
) -> User:
    """Get the current user, requiring an active account."""
    if not current_user.is_active:
        raise AuthorizationError("User account is inactive")
    return current_user
