"""Error Hierarchy — typed, categorized exceptions for every engine failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are raised before any write of the failing operation
    - Infrastructure errors (500-level) may surface after earlier steps were persisted
    - to_response() produces a transport-neutral envelope; http_status is only a hint
    - No driver internals leaked in messages

Design Decisions:
    - Single hierarchy with TrackerError base: the calling layer catches one type
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone

from assignment_tracker.core.conflict_detector import AssignmentConflict


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


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    task_id: str | None = None
    user_id: str | None = None
    operation: str | None = None


class TrackerError(Exception):
    """Base exception for all assignment tracker errors."""

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
        """Convert to standardized error envelope."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "task_id": self.context.task_id,
                    "user_id": self.context.user_id,
                    "operation": self.context.operation,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ResourceNotFoundError(TrackerError):
    """Requested task or user does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ReferenceNotFoundError(TrackerError):
    """An assigned user supplied at task creation does not exist."""
    def __init__(self, user_id: str, context: ErrorContext | None = None):
        super().__init__(
            f"Assigned user '{user_id}' not found",
            "REFERENCE_NOT_FOUND", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.user_id = user_id


class DuplicateEmailError(TrackerError):
    """Another user already holds the requested email."""
    def __init__(self, email: str, context: ErrorContext | None = None):
        super().__init__(
            "User with this email already exists",
            "DUPLICATE_EMAIL", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 400,
        )
        self.email = email


class AssignmentConflictError(TrackerError):
    """One or more requested tasks are owned by a different user."""
    def __init__(
        self, conflicts: list[AssignmentConflict], context: ErrorContext | None = None,
    ):
        super().__init__(
            "One or more tasks are already assigned to another user",
            "ASSIGNMENT_CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 400,
        )
        self.conflicts = conflicts

    def to_response(self) -> dict:
        response = super().to_response()
        response["error"]["conflicts"] = [
            {"task_id": c.task_id, "current_owner": c.current_owner}
            for c in self.conflicts
        ]
        return response


# ─── Infrastructure Errors (500-level) ──────────────────────────

class StoreFailureError(TrackerError):
    """Document store operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Store {operation} failed: {message}",
            "STORE_FAILURE", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class StoreConflictError(StoreFailureError):
    """A write was refused by a store uniqueness or integrity constraint.

    Handlers that know which constraint applies translate it into a domain
    error (e.g. DuplicateEmailError when a concurrent writer took the email).
    """
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(message, operation, context)
        self.code = "STORE_CONFLICT"
        self.category = ErrorCategory.CONFLICT
        self.severity = ErrorSeverity.ERROR
        self.http_status = 409
