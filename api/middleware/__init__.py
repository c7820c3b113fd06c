"""Error envelope, request logging and rate limiting for the API."""

from api.middleware.error_handler import APIError, error_response, setup_error_handlers
from api.middleware.logging import LoggingMiddleware, get_correlation_id
from api.middleware.rate_limit import (
    limiter,
    rate_limit_exceeded_handler,
    setup_rate_limiting,
)

__all__ = [
    "APIError",
    "error_response",
    "setup_error_handlers",
    "LoggingMiddleware",
    "get_correlation_id",
    "limiter",
    "rate_limit_exceeded_handler",
    "setup_rate_limiting",
]
