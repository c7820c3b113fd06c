"""
Authentication Package

Bearer JWTs over bcrypt-hashed passwords. Routes depend on
``get_current_active_user``; tender data is always scoped to that user.
"""

from api.auth.jwt import TokenError, TokenExpiredError, create_access_token, verify_token
from api.auth.password import hash_password, verify_password
from api.auth.dependencies import get_current_active_user, get_current_user

__all__ = [
    "TokenError",
    "TokenExpiredError",
    "create_access_token",
    "verify_token",
    "hash_password",
    "verify_password",
    "get_current_active_user",
    "get_current_user",
]
