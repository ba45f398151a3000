"""Error Handlers — global exception handlers for the payments API.

Invariants:
    - PaymentsError → its own http_status; body is {} unless error details are enabled
    - RequestValidationError (malformed JSON or payload) → 400
    - Exception (catch-all) → 500, never leaks internal details
    - Server-side failures (5xx) are logged at ERROR with their cause;
      client-side failures (4xx) are logged at INFO without traceback

Design Decisions:
    - Three-layer handler: domain (PaymentsError), validation (Pydantic), catch-all (Exception)
    - Structurally empty bodies by default: clients branch on status codes only
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from payments_api.core.errors import PaymentsError, ErrorSeverity

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI, expose_details: bool = False) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_payments_error_handler(app, expose_details)
    _register_validation_error_handler(app, expose_details)
    _register_generic_error_handler(app, expose_details)


def _register_payments_error_handler(app: FastAPI, expose_details: bool) -> None:
    """Register payments domain/infrastructure error handler."""

    @app.exception_handler(PaymentsError)
    async def payments_error_handler(request: Request, exc: PaymentsError):
        """Handle all payments domain/infrastructure errors."""
        extra = {
            "error_code": exc.code,
            "path": request.url.path,
            "payment_id": exc.context.payment_id,
            "operation": exc.context.operation,
        }
        if exc.is_server_error:
            cause = exc.context.cause or exc.__cause__
            logger.error(
                f"PaymentsError: {exc.message}", extra=extra,
                exc_info=(type(cause), cause, cause.__traceback__) if cause else None,
            )
        else:
            logger.info(f"{exc.code}: {exc.message}", extra=extra)
        return JSONResponse(
            status_code=exc.http_status,
            content=exc.to_response() if expose_details else {},
        )


def _register_validation_error_handler(app: FastAPI, expose_details: bool) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.info(
            f"Validation error on {request.url.path}: {exc.errors()}",
            extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc) if expose_details else {},
        )


def _register_generic_error_handler(app: FastAPI, expose_details: bool) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        content = {}
        if expose_details:
            content = {
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            }
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content,
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "category": "validation",
            "severity": ErrorSeverity.WARNING.value,
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    }
