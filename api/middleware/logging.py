"""
Logging Middleware

Request/response logging with a correlation id per request.
"""

import logging
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("tender_eval.api.requests")

# Polled by load balancers; not worth a log line each
QUIET_PATHS = ("/health",)


def get_correlation_id(request: Request) -> str:
    """Get the correlation ID from the request state."""
    return getattr(request.state, "correlation_id", "unknown")


def _actor(request: Request) -> str:
    user_id = getattr(request.state, "user_id", None)
    if user_id:
        return f"user:{user_id}"
    return request.client.host if request.client else "unknown"


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs each request with its status, duration and caller.

    The correlation id is returned in ``X-Correlation-ID`` so a client
    report can be matched to the server log.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())[:8]
        request.state.correlation_id = correlation_id
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"[{correlation_id}] {request.method} {request.url.path} "
                f"ERROR: {e} ({duration_ms:.2f}ms)"
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        response.headers["X-Correlation-ID"] = correlation_id
        response.headers["X-Response-Time-Ms"] = f"{duration_ms:.2f}"

        if request.url.path in QUIET_PATHS and response.status_code < 400:
            return response

        # The auth dependency sets user_id, so the caller is known only afterwards
        log_level = logging.INFO if response.status_code < 400 else logging.WARNING
        logger.log(
            log_level,
            f"[{correlation_id}] {request.method} {request.url.path} "
            f"-> {response.status_code} ({duration_ms:.2f}ms) by {_actor(request)}"
        )
        return response
