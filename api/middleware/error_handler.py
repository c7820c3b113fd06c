"""
Error Handler Middleware

Global error handling for consistent API responses. Every error body is
``{"error": {"code": ..., "message": ..., ["details": ...]}}``.
"""

import logging
import traceback
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from config.settings import settings
from scoring.errors import (
    AggregationError,
    ConfigurationError,
    ExternalEvaluationFailure,
    MissingScoreError,
    ScoringError,
)

logger = logging.getLogger("tender_eval.api.errors")


class APIError(Exception):
    """Base API error with status code and error code."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Any] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details
        super().__init__(message)


class NotFoundError(APIError):
    """Resource not found error."""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, 404, "NOT_FOUND")


class ValidationError(APIError):
    """Validation error."""

    def __init__(self, message: str = "Validation failed"):
        super().__init__(message, 400, "VALIDATION_ERROR")


class ConflictError(APIError):
    """Resource already exists or is in a conflicting state."""

    def __init__(self, message: str = "Conflict"):
        super().__init__(message, 409, "CONFLICT")


class AuthenticationError(APIError):
    """Authentication error."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, 401, "AUTH_REQUIRED")


class AuthorizationError(APIError):
    """Authorization error."""

    def __init__(self, message: str = "Permission denied"):
        super().__init__(message, 403, "PERMISSION_DENIED")


class ExternalServiceError(APIError):
    """An upstream service failed."""

    def __init__(self, message: str = "Upstream service failed"):
        super().__init__(message, 502, "EXTERNAL_SERVICE_ERROR")


class ServiceUnavailableError(APIError):
    """A feature depends on a service that is not configured."""

    def __init__(self, message: str = "Service unavailable"):
        super().__init__(message, 503, "SERVICE_UNAVAILABLE")


def error_response(
    status_code: int,
    code: str,
    message: str,
    details: Optional[Any] = None
) -> JSONResponse:
    error = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return JSONResponse(status_code=status_code, content={"error": error})


def scoring_error_response(exc: ScoringError) -> JSONResponse:
    """Translate a scoring-core failure into an HTTP error."""
    if isinstance(exc, ConfigurationError):
        details = {"total": exc.total} if exc.total is not None else None
        return error_response(422, "CONFIGURATION_ERROR", str(exc), details)
    if isinstance(exc, AggregationError):
        return error_response(422, "AGGREGATION_ERROR", str(exc))
    if isinstance(exc, MissingScoreError):
        return error_response(
            status.HTTP_409_CONFLICT,
            "MISSING_SCORE",
            str(exc),
            {"bidder_id": exc.bidder_id, "category_ids": exc.category_ids}
        )
    if isinstance(exc, ExternalEvaluationFailure):
        return error_response(status.HTTP_502_BAD_GATEWAY, "EVALUATION_FAILED", str(exc))
    return error_response(422, "SCORING_ERROR", str(exc))


def setup_error_handlers(app: FastAPI):
    """
    Set up global error handlers for the application.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        """Handle custom API errors."""
        logger.warning(f"API Error: {exc.error_code} - {exc.message}")
        return error_response(exc.status_code, exc.error_code, exc.message, exc.details)

    @app.exception_handler(ScoringError)
    async def scoring_error_handler(request: Request, exc: ScoringError):
        """Handle failures raised by the scoring core."""
        logger.warning(f"Scoring Error: {type(exc).__name__} - {exc}")
        return scoring_error_response(exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions."""
        return error_response(exc.status_code, "HTTP_ERROR", exc.detail)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle request validation errors."""
        errors = []
        for error in exc.errors():
            errors.append({
                "field": ".".join(str(loc) for loc in error["loc"]),
                "message": error["msg"],
                "type": error["type"]
            })

        return error_response(422, "VALIDATION_ERROR", "Request validation failed", errors)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        correlation_id = getattr(request.state, "correlation_id", "unknown")
        logger.error(f"[{correlation_id}] Unhandled exception: {exc}")
        logger.error(traceback.format_exc())

        # Don't expose internal errors in production
        if settings.api_env == "development":
            message = str(exc)
        else:
            message = "An internal error occurred"

        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "INTERNAL_ERROR",
            message
        )
