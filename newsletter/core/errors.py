"""Error Hierarchy — typed, categorized exceptions for all newsletter failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() never exposes the message of a 500-level error
    - Lower-level causes are chained with `raise ... from`, never flattened into the message

Design Decisions:
    - Single hierarchy with NewsletterError base: FastAPI global handler catches all
    - UnknownTokenError and UnexpectedConfirmationError share ConfirmationError so the
      confirmation route can be reasoned about as one failure type with two outcomes
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone

GENERIC_ERROR_MESSAGE = "An unexpected error occurred"


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTHORIZATION = "authorization"
    CONFLICT = "conflict"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    CONFIGURATION = "configuration"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    subscriber_id: str | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


class NewsletterError(Exception):
    """Base exception for all newsletter errors."""

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
    def public_message(self) -> str:
        """Message safe to return to the caller."""
        if self.http_status >= 500:
            return GENERIC_ERROR_MESSAGE
        return self.message

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.public_message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class SubscriberValidationError(NewsletterError):
    """Subscriber input (email, name) failed structural validation."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class DuplicateSubscriberError(NewsletterError):
    """A subscriber with this email already exists."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "A subscriber with this email address already exists",
            "DUPLICATE_SUBSCRIBER", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )


class ConfirmationError(NewsletterError):
    """Confirmation workflow failed."""


class UnknownTokenError(ConfirmationError):
    """No subscriber is associated with the presented subscription token."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "There is no subscriber associated with this subscription token",
            "UNKNOWN_TOKEN", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 401,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class UnexpectedConfirmationError(ConfirmationError):
    """A collaborator failed while confirming a subscriber."""
    def __init__(self, operation: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.operation = operation
        super().__init__(
            operation, "CONFIRMATION_FAILED", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, ctx, 500,
        )
        self.operation = operation


class UnexpectedSubscribeError(NewsletterError):
    """A collaborator failed while registering a subscriber."""
    def __init__(self, operation: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.operation = operation
        super().__init__(
            operation, "SUBSCRIBE_FAILED", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, ctx, 500,
        )
        self.operation = operation


class DatabaseError(NewsletterError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation


class EmailDeliveryError(NewsletterError):
    """Outbound email provider call failed."""
    def __init__(
        self, message: str, failure_type: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Email provider error ({failure_type}): {message}",
            "EMAIL_DELIVERY_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.failure_type = failure_type


class ConfigError(NewsletterError):
    """Settings could not be loaded. Fatal at startup, never retried."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFIGURATION_ERROR", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, context, 500,
        )
