"""Error Hierarchy: typed, categorized exceptions for all Rollcall failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Input errors (400-level) are raised at the boundary, never deep in the ledger
    - Join/cancel not-found and already-in-state are outcomes, not exceptions
    - retryable=True only for conflicts the caller resolves by re-running the whole operation
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with RollcallError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"
    CONFLICT = "conflict"
    TIMEOUT = "timeout"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    scope_id: str | None = None
    event_id: str | None = None
    member_id: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None
    retry_after_ms: int | None = None


class RollcallError(Exception):
    """Base exception for all Rollcall errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status
        self.retryable = retryable

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "retryable": self.retryable,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "scope_id": self.context.scope_id,
                    "event_id": self.context.event_id,
                    "member_id": self.context.member_id,
                    "retry_after_ms": self.context.retry_after_ms,
                },
            }
        }


# ─── Input Errors (400-level) ───────────────────────────────────

class InputValidationError(RollcallError):
    """Caller supplied a value the core cannot work with."""
    def __init__(
        self,
        message: str,
        field: str,
        code: str = "VALIDATION_ERROR",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class InvalidDateError(InputValidationError):
    """Date string is not an ISO-8601 calendar date (YYYY-MM-DD)."""
    def __init__(self, value: object, field: str = "date", context: ErrorContext | None = None):
        super().__init__(
            f"'{value}' is not a valid calendar date (expected YYYY-MM-DD)",
            field, "INVALID_DATE", context,
        )
        self.value = value


class InvalidWeekdayError(InputValidationError):
    """Weekday value outside 0 (Sunday) .. 6 (Saturday)."""
    def __init__(self, value: object, context: ErrorContext | None = None):
        super().__init__(
            f"'{value}' is not a valid weekday (expected 0=Sunday .. 6=Saturday)",
            "weekdays", "INVALID_WEEKDAY", context,
        )
        self.value = value


class ResourceNotFoundError(RollcallError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class EventAlreadyConfirmedError(RollcallError):
    """Date confirmation attempted on an event that has left PLANNING."""
    def __init__(self, event_id: str, status: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.event_id = event_id
        super().__init__(
            f"Event '{event_id}' is {status}; its date can only be set while planning",
            "EVENT_NOT_PLANNING", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, ctx, 409,
        )
        self.status = status


# ─── Infrastructure / Concurrency Errors ────────────────────────

class DatabaseError(RollcallError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class ConcurrencyError(RollcallError):
    """Concurrent modification detected; re-run the whole operation."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONCURRENCY_CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409, retryable=True,
        )


class LedgerBusyError(RollcallError):
    """Per-event serialization lock not acquired within the bounded timeout."""
    def __init__(
        self,
        event_id: str,
        timeout_seconds: float,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.event_id = event_id
        ctx.retry_after_ms = ctx.retry_after_ms or int(timeout_seconds * 1000)
        super().__init__(
            f"Event '{event_id}' is busy (lock not acquired within {timeout_seconds}s)",
            "LEDGER_BUSY", ErrorCategory.TIMEOUT,
            ErrorSeverity.WARNING, ctx, 503, retryable=True,
        )
        self.timeout_seconds = timeout_seconds
