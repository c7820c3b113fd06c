"""
Authentication Router

Endpoints for user registration, login, and token management.
"""

import re
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.security import OAuth2PasswordRequestForm
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from config.logging_config import get_logger
from database.connection import get_db
from database.models import User
from api.auth.jwt import create_access_token, create_refresh_token, verify_token, TokenError
from api.auth.password import hash_password, verify_password, MAX_PASSWORD_BYTES
from api.middleware.error_handler import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ValidationError,
)
from api.middleware.rate_limit import limiter, LIMIT_AUTH

logger = get_logger("api.auth")

router = APIRouter(prefix="/auth", tags=["Authentication"])

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6
INVALID_CREDENTIALS = "Login failed. Invalid credentials."


# ============================================================================
# Request/Response Models
# ============================================================================

class Credentials(BaseModel):
    """Email/password body shared by register and login."""
    email: Optional[str] = None
    password: Optional[str] = None


class TokenRefresh(BaseModel):
    """Token refresh request."""
    refresh_token: str


class UserSummary(BaseModel):
    id: str
    email: str


class RegisterResponse(BaseModel):
    message: str
    user: UserSummary


class LoginResponse(BaseModel):
    message: str
    token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserSummary


class TokenResponse(BaseModel):
    """OAuth2 token response."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


def _validate_credentials(data: Credentials) -> tuple[str, str]:
    if not data.email or not data.password:
        raise ValidationError("Email and password are required.")
    email = data.email.strip().lower()
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("Invalid email format.")
    return email, data.password


def _issue_tokens(user: User) -> tuple[str, str]:
    token_data = {"sub": str(user.id), "email": user.email}
    return create_access_token(token_data), create_refresh_token(token_data)


async def _authenticate(db: AsyncSession, email: str, password: str) -> User:
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()

    if user is None or not verify_password(password, user.password_hash):
        logger.info(f"Failed login for {email}")
        raise AuthenticationError(INVALID_CREDENTIALS)

    if not user.is_active:
        raise AuthorizationError("Account is inactive")

    return user


# ============================================================================
# Auth Endpoints
# ============================================================================

@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(LIMIT_AUTH)
async def register(
    request: Request,
    data: Credentials,
    db: AsyncSession = Depends(get_db)
):
    """Register a new user. The client logs in afterwards."""
    email, password = _validate_credentials(data)

    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long."
        )
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long.")

    result = await db.execute(select(User).where(User.email == email))
    if result.scalar_one_or_none():
        raise ConflictError("User already exists with this email.")

    user = User(email=email, password_hash=hash_password(password))
    db.add(user)
    await db.commit()

    logger.info(f"Registered user {user.id}")
    return RegisterResponse(
        message="User registered successfully. Please login.",
        user=UserSummary(id=str(user.id), email=user.email)
    )


@router.post("/login", response_model=LoginResponse)
@limiter.limit(LIMIT_AUTH)
async def login(
    request: Request,
    data: Credentials,
    db: AsyncSession = Depends(get_db)
):
    """Login with email and password."""
    email, password = _validate_credentials(data)
    user = await _authenticate(db, email, password)
    access_token, refresh_token = _issue_tokens(user)

    return LoginResponse(
        message="Login successful.",
        token=access_token,
        refresh_token=refresh_token,
        expires_in=settings.jwt_expire_minutes * 60,
        user=UserSummary(id=str(user.id), email=user.email)
    )


@router.post("/token", response_model=TokenResponse)
@limiter.limit(LIMIT_AUTH)
async def token(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db)
):
    """OAuth2 password flow, used by the interactive API docs."""
    email, password = _validate_credentials(
        Credentials(email=form_data.username, password=form_data.password)
    )
    user = await _authenticate(db, email, password)
    access_token, refresh_token = _issue_tokens(user)

    return TokenResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        expires_in=settings.jwt_expire_minutes * 60
    )


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    data: TokenRefresh,
    db: AsyncSession = Depends(get_db)
):
    """Exchange a refresh token for a new token pair."""
    try:
        payload = verify_token(data.refresh_token, "refresh")
        user_id = uuid.UUID(payload.get("sub") or "")
    except (TokenError, ValueError) as e:
        raise AuthenticationError(str(e) if isinstance(e, TokenError) else "Token is not valid.")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if user is None or not user.is_active:
        raise AuthenticationError("User no longer valid")

    access_token, new_refresh_token = _issue_tokens(user)
    return TokenResponse(
        access_token=access_token,
        refresh_token=new_refresh_token,
        expires_in=settings.jwt_expire_minutes * 60
    )
