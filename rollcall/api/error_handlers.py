"""Error Handlers: map every exception escaping a route to the Rollcall error envelope.

Invariants:
    - Every error body has the shape {"error": {code, message, category, severity, retryable, ...}}
    - Retryable errors with a retry_after_ms hint also carry a Retry-After header (seconds, >= 1)
    - Unhandled exceptions answer 500 without leaking internals

Design Decisions:
    - Module-level handler functions registered with add_exception_handler,
      so tests can call them directly
    - Client mistakes (4xx) and retryable conflicts log at WARNING; everything else at ERROR
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from rollcall.core.errors import ErrorCategory, ErrorSeverity, RollcallError

logger = logging.getLogger(__name__)


def _envelope(
    code: str,
    message: str,
    category: ErrorCategory,
    severity: ErrorSeverity,
    **extra,
) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "category": category.value,
            "severity": severity.value,
            "retryable": False,
            **extra,
        },
    }


def _retry_after_header(exc: RollcallError) -> dict[str, str] | None:
    if not exc.retryable or not exc.context.retry_after_ms:
        return None
    seconds = max(1, -(-exc.context.retry_after_ms // 1000))
    return {"Retry-After": str(seconds)}


async def handle_rollcall_error(request: Request, exc: RollcallError) -> JSONResponse:
    expected = exc.http_status < 500 or exc.retryable
    (logger.warning if expected else logger.error)(
        f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
        extra={"error_code": exc.code},
    )
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_response(),
        headers=_retry_after_header(exc),
    )


async def handle_validation_error(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    errors = exc.errors()
    logger.warning(
        f"Rejected request body on {request.url.path}: {len(errors)} problem(s)",
        extra={"error_code": "VALIDATION_ERROR"},
    )
    details = [
        {
            "field": ".".join(str(part) for part in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in errors
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_envelope(
            "VALIDATION_ERROR", "Invalid request data",
            ErrorCategory.VALIDATION, ErrorSeverity.ERROR,
            details=details,
        ),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}",
        exc_info=exc,
        extra={"error_code": "INTERNAL_ERROR"},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope(
            "INTERNAL_ERROR", "An unexpected error occurred",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
        ),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the domain, validation and catch-all handlers on the app."""
    app.add_exception_handler(RollcallError, handle_rollcall_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
