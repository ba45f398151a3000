"""Error Hierarchy — typed, categorized exceptions for every payments failure mode.

Invariants:
    - Store errors carry no HTTP knowledge; they are classified by kind
      (is_conflict / is_not_found), never by inspecting message text
    - Every API error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) are recoverable; server errors (500-level) are critical
    - to_response() produces the REST envelope; internal details never leak into it

Design Decisions:
    - Two hierarchies: StoreError for the storage boundary, PaymentsError for the
      HTTP boundary. The resource handler translates one into the other.
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone


# ─── Store Errors (storage boundary) ────────────────────────────

class StoreError(Exception):
    """Connectivity, integrity or unexpected mutation failure in the item store."""

    def __init__(self, message: str, operation: str = "unknown"):
        super().__init__(message)
        self.message = message
        self.operation = operation


class ItemNotFoundError(StoreError):
    """No non-deleted item matches the requested id."""

    def __init__(self, item_id: str, operation: str = "fetch"):
        super().__init__(f"item '{item_id}' not found", operation)
        self.item_id = item_id


class ItemConflictError(StoreError):
    """Duplicate id, stale version, or a racing tombstone."""

    def __init__(self, item_id: str, operation: str, version: int | None = None):
        detail = f" at version {version}" if version is not None else ""
        super().__init__(f"conflict on item '{item_id}'{detail}", operation)
        self.item_id = item_id
        self.version = version


def is_conflict(err: BaseException) -> bool:
    return isinstance(err, ItemConflictError)


def is_not_found(err: BaseException) -> bool:
    return isinstance(err, ItemNotFoundError)


# ─── API Errors (HTTP boundary) ─────────────────────────────────

class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    TRANSLATION = "translation"
    RATE_LIMIT = "rate_limit"
    TIMEOUT = "timeout"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    payment_id: str | None = None
    operation: str | None = None
    cause: BaseException | None = None


class PaymentsError(Exception):
    """Base exception for all errors surfaced over HTTP."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    @property
    def is_server_error(self) -> bool:
        return self.http_status >= 500

    def to_response(self) -> dict:
        """Convert to standardized REST error envelope."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "payment_id": self.context.payment_id,
                    "operation": self.context.operation,
                },
            }
        }


# ─── Client Errors (400-level) ──────────────────────────────────

class RequestValidationFailed(PaymentsError):
    """Inbound payload or query parameter is malformed or semantically invalid."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.field = field


class ResourceNotFoundError(PaymentsError):
    """Requested resource does not exist (or was deleted)."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )


class ConcurrencyError(PaymentsError):
    """Concurrent modification or duplicate id detected."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONCURRENCY_CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )


class RateLimitExceeded(PaymentsError):
    """Client sent more requests than the configured rate allows."""
    def __init__(self, limit: int, period_seconds: int, retry_after: int):
        super().__init__(
            f"Rate limit exceeded: {limit} requests per {period_seconds}s",
            "RATE_LIMIT_EXCEEDED", ErrorCategory.RATE_LIMIT,
            ErrorSeverity.WARNING, None, 429,
        )
        self.retry_after = retry_after


# ─── Server Errors (500-level) ──────────────────────────────────

class DatabaseError(PaymentsError):
    """Store operation failed for a reason other than conflict or absence."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation


class RequestTimeout(PaymentsError):
    """Request did not complete within the configured timeout."""
    def __init__(self, timeout: float, context: ErrorContext | None = None):
        super().__init__(
            f"Request timed out after {timeout:g}s",
            "REQUEST_TIMEOUT", ErrorCategory.TIMEOUT,
            ErrorSeverity.ERROR, context, 504,
        )


class TranslationError(PaymentsError):
    """A stored payload could not be mapped back to a payment (corrupt data)."""
    def __init__(self, message: str, item_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.payment_id = item_id
        super().__init__(
            f"Stored payment '{item_id}' is unreadable: {message}",
            "TRANSLATION_ERROR", ErrorCategory.TRANSLATION,
            ErrorSeverity.CRITICAL, ctx, 500,
        )
        self.item_id = item_id
