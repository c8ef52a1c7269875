"""
Exception hierarchy for the GyanMitra service.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging, and carry
the HTTP status they surface as.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from enum import Enum
from typing import Any


class GyanMitraException(Exception):
    """Base exception for all GyanMitra application errors."""

    status_code: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(GyanMitraException):
    """Raised when input validation fails. Never follows a partial write."""

    status_code = 400

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        self.field = field
        super().__init__(message, details)


class AuthError(GyanMitraException):
    """Raised when no user identity can be resolved from the request."""

    status_code = 401

    def __init__(self, reason: str | None = None) -> None:
        # The reason is kept for logs only; clients always see the same message.
        self.reason = reason
        super().__init__("Authentication required")


class NotFoundOrForbiddenError(GyanMitraException):
    """Raised when a resource is missing or not owned by the caller."""

    status_code = 404

    def __init__(self, resource: str, resource_id: Any | None = None) -> None:
        """
        Initialize not-found error.

        Args:
            resource: Resource kind ("Conversation", "Feedback", ...)
            resource_id: Identifier that was requested
        """
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} not found or you do not have access")


class ConflictError(GyanMitraException):
    """Raised on duplicate feedback or a concurrent conversation write."""

    status_code = 409

    def __init__(
        self,
        message: str,
        existing: dict[str, Any] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize conflict error.

        Args:
            message: Error message
            existing: Snapshot of the record that already occupies the slot
            details: Additional context
        """
        self.existing = existing
        super().__init__(message, details)


class UpstreamFailure(str, Enum):
    """Classification of answer-service failures (logged, not shown)."""

    OFFLINE = "offline"
    TIMEOUT = "timeout"
    UPSTREAM_ERROR = "upstream_error"
    INVALID_RESPONSE = "invalid_response"


class UpstreamUnavailableError(GyanMitraException):
    """Raised when the answer-generation service cannot produce an answer."""

    status_code = 503

    def __init__(
        self,
        message: str,
        kind: UpstreamFailure,
        upstream_status: int | None = None,
        conversation_id: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize upstream error.

        Args:
            message: Error message
            kind: Failure classification
            upstream_status: HTTP status returned by the service, if any
            conversation_id: Conversation that already holds the question
            details: Additional context
        """
        details = details or {}
        details["kind"] = kind.value
        if upstream_status is not None:
            details["upstream_status"] = upstream_status
        self.kind = kind
        self.upstream_status = upstream_status
        self.conversation_id = conversation_id
        super().__init__(message, details)

    def with_conversation(self, conversation_id: Any) -> "UpstreamUnavailableError":
        """Attach the conversation id that retries should reuse."""
        self.conversation_id = conversation_id
        return self


class InternalError(GyanMitraException):
    """Raised for unexpected failures."""

    status_code = 500
