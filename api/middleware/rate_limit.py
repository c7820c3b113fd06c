"""
Rate Limiting Middleware

Per-user (or per-IP before login) request limits via slowapi.
"""

from fastapi import FastAPI, Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from config.settings import settings
from api.middleware.error_handler import error_response

# Rate limit decorators for use on routes
# Usage: @limiter.limit(LIMIT_AUTH)

LIMIT_STANDARD = "100/minute"
LIMIT_EVALUATION = "10/minute"  # Calls the external evaluator
LIMIT_AUTH = "20/minute"
LIMIT_UPLOAD = "30/minute"
LIMIT_COPILOT = "30/minute"


def get_identifier(request: Request) -> str:
    """
    Get rate limit identifier from request.

    Uses authenticated user ID if available, otherwise client IP.
    """
    user_id = getattr(request.state, "user_id", None)
    if user_id:
        return f"user:{user_id}"

    return get_remote_address(request)


limiter = Limiter(
    key_func=get_identifier,
    default_limits=[LIMIT_STANDARD],
    enabled=settings.rate_limit_enabled
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """429 in the API's error envelope, with the limiter's Retry-After headers."""
    response = error_response(429, "RATE_LIMITED", f"Rate limit exceeded: {exc.detail}")
    return request.app.state.limiter._inject_headers(
        response, getattr(request.state, "view_rate_limit", None)
    )


def setup_rate_limiting(app: FastAPI):
    """
    Set up rate limiting for the application.

    Routes without their own ``@limiter.limit`` get ``LIMIT_STANDARD``.
    """
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)
