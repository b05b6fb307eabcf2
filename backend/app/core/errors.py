"""Error Hierarchy — typed, categorized exceptions for every goal tracker failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) are the caller's to fix; storage errors (503) may be retried by the caller
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages (no storage text, no token reason)

Design Decisions:
    - Single hierarchy with GoalTrackerError base: one FastAPI handler serves all of them
    - NotFound covers "absent" and "owned by someone else" alike
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
    CONFLICT = "conflict"
    UNAUTHORIZED = "unauthorized"
    RESOURCE_NOT_FOUND = "resource_not_found"
    SERVICE_UNAVAILABLE = "service_unavailable"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context kept for logs. Never serialized to clients."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    identity_id: str | None = None
    goal_id: str | None = None
    debug_info: dict[str, Any] | None = None


class GoalTrackerError(Exception):
    """Base exception for all goal tracker errors."""

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


# ─── Client Errors (400-level) ──────────────────────────────────

class InputValidationError(GoalTrackerError):
    """Malformed or missing input. Caller must correct and retry."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.field = field


class ConflictError(GoalTrackerError):
    """Duplicate username or email."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )
        self.field = field


class UnauthorizedError(GoalTrackerError):
    """Missing, malformed or rejected credential. Caller must re-authenticate."""
    def __init__(
        self, message: str = "Authentication required",
        context: ErrorContext | None = None, code: str = "UNAUTHORIZED",
    ):
        super().__init__(
            message, code, ErrorCategory.UNAUTHORIZED,
            ErrorSeverity.WARNING, context, 401,
        )


class InvalidTokenError(UnauthorizedError):
    """Token failed verification. `reason` is for logs only."""
    def __init__(self, reason: str, context: ErrorContext | None = None):
        super().__init__("Invalid or expired token", context, code="INVALID_TOKEN")
        self.reason = reason


class ResourceNotFoundError(GoalTrackerError):
    """Requested resource does not exist or is not owned by the caller."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


# ─── Infrastructure Errors (500-level) ──────────────────────────

class ServiceUnavailableError(GoalTrackerError):
    """Storage operation failed. Not retried here; the caller may retry later."""
    def __init__(self, operation: str, context: ErrorContext | None = None):
        super().__init__(
            "The service is temporarily unavailable. Please retry later.",
            "SERVICE_UNAVAILABLE", ErrorCategory.SERVICE_UNAVAILABLE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
