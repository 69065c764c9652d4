"""Error Hierarchy — typed, categorized exceptions for all Whiteloop failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are surfaced to the caller; nothing retries inside the core
    - Infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with WhiteloopError base: FastAPI global handler catches all
    - ConflictError subclasses carry the uniqueness invariant that tripped, so
      callers can tell a duplicate transcript from an invalid transition
    - ErrorContext as dataclass: entity ids for observability without coupling
      to the logging framework
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
    CONFLICT = "conflict"
    AUTHORIZATION = "authorization"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    study_id: str | None = None
    application_id: str | None = None
    match_id: str | None = None
    session_id: str | None = None
    debug_info: dict[str, Any] | None = None


class WhiteloopError(Exception):
    """Base exception for all Whiteloop errors."""

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
                "context": {
                    "study_id": self.context.study_id,
                    "application_id": self.context.application_id,
                    "match_id": self.context.match_id,
                    "session_id": self.context.session_id,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class InputValidationError(WhiteloopError):
    """Malformed or missing input."""
    def __init__(
        self, message: str, field: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class ResourceNotFoundError(WhiteloopError):
    """Requested resource does not exist."""
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


class ConflictError(WhiteloopError):
    """A uniqueness invariant or state transition would be violated."""
    def __init__(
        self, message: str, code: str = "CONFLICT",
        category: ErrorCategory = ErrorCategory.CONFLICT,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, category, ErrorSeverity.WARNING, context, 409,
        )


class DuplicateApplicationError(ConflictError):
    """An application already exists for this (study, participant)."""
    def __init__(self, study_id: str, participant_id: str, context: ErrorContext | None = None):
        super().__init__(
            f"Participant '{participant_id}' has already applied to study '{study_id}'",
            "DUPLICATE_APPLICATION", context=context,
        )


class DuplicateSessionError(ConflictError):
    """A session was already recorded for this match."""
    def __init__(self, match_id: str, context: ErrorContext | None = None):
        super().__init__(
            f"A session is already recorded for match '{match_id}'",
            "DUPLICATE_SESSION", context=context,
        )


class DuplicateTranscriptError(ConflictError):
    """A transcript was already ingested for this session."""
    def __init__(self, session_id: str, context: ErrorContext | None = None):
        super().__init__(
            f"A transcript is already recorded for session '{session_id}'",
            "DUPLICATE_TRANSCRIPT", context=context,
        )


class InvalidTransitionError(ConflictError):
    """Application status change not allowed by the lifecycle."""
    def __init__(self, current: str, requested: str, context: ErrorContext | None = None):
        super().__init__(
            f"Cannot move application from '{current}' to '{requested}'",
            "INVALID_TRANSITION", ErrorCategory.BUSINESS_RULE, context,
        )
        self.current = current
        self.requested = requested


class MatchNotScheduledError(ConflictError):
    """Session artifacts require a scheduled match."""
    def __init__(self, match_id: str, context: ErrorContext | None = None):
        super().__init__(
            f"Match '{match_id}' has not been scheduled",
            "MATCH_NOT_SCHEDULED", ErrorCategory.BUSINESS_RULE, context,
        )


class UnauthorizedError(WhiteloopError):
    """No caller identity was presented."""
    def __init__(self, message: str = "Authentication required"):
        super().__init__(
            message, "UNAUTHORIZED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, None, 401,
        )


class ForbiddenError(WhiteloopError):
    """Caller role may not invoke the operation."""
    def __init__(self, role: str, operation: str):
        super().__init__(
            f"Role '{role}' is not allowed to {operation}",
            "FORBIDDEN", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, None, 403,
        )
        self.role = role
        self.operation = operation


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(WhiteloopError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
