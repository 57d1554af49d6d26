"""Error Hierarchy: typed, categorized exceptions for every failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Validation errors are 400-level and never touch the store
    - Store errors are 500-level; their message is for logs, never for callers
    - to_response() produces the REST envelope used by the global handler

Design Decisions:
    - Single hierarchy with StudentRecordsError base: one FastAPI handler catches all
    - Route handlers translate store errors into fixed per-endpoint messages,
      so the global handler only sees what escaped a route
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context carried with an error for logging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    operation: str | None = None


class StudentRecordsError(Exception):
    """Base exception for all student records errors."""

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

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

REQUIRED_FIELDS_MESSAGE = "All fields are required"


class FieldValidationError(StudentRecordsError):
    """A required student field is absent, empty or unparseable."""
    def __init__(self, fields: list[str], context: ErrorContext | None = None):
        super().__init__(
            REQUIRED_FIELDS_MESSAGE, "VALIDATION_ERROR",
            ErrorCategory.VALIDATION, ErrorSeverity.ERROR, context, 400,
        )
        self.fields = fields


# ─── Infrastructure Errors (500-level) ──────────────────────────

class StoreUnavailableError(StudentRecordsError):
    """Store unreachable, pool exhausted or acquisition timed out."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.operation = operation
        super().__init__(
            f"Store unavailable during {operation}: {message}",
            "STORE_UNAVAILABLE", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, ctx, 503,
        )
        self.operation = operation


class QueryFailureError(StudentRecordsError):
    """Statement failed (malformed SQL, constraint violation, driver error)."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.operation = operation
        super().__init__(
            f"Query failed during {operation}: {message}",
            "QUERY_FAILURE", ErrorCategory.DATABASE,
            ErrorSeverity.ERROR, ctx, 500,
        )
        self.operation = operation
