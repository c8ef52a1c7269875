"""
Correlation ID context.

Carries the per-request correlation id across await points using
contextvars so that every log record of a request can be tied together.

Dependencies: contextvars
System role: Request tracing across service boundaries
"""

import uuid
from contextvars import ContextVar, Token

CORRELATION_HEADER = "X-Correlation-ID"

correlation_id_ctx: ContextVar[str] = ContextVar("correlation_id", default="")


def set_correlation_id(correlation_id: str | None = None) -> Token:
    """
    Set the correlation id for the current context.

    Args:
        correlation_id: Incoming id; a new UUID4 is generated when empty

    Returns:
        Token: Reset token for clear_correlation_id
    """
    return correlation_id_ctx.set(correlation_id or str(uuid.uuid4()))


def get_correlation_id() -> str:
    """Return the current correlation id, or an empty string outside a request."""
    return correlation_id_ctx.get()


def clear_correlation_id(token: Token | None = None) -> None:
    """Restore the previous correlation id."""
    if token is not None:
        correlation_id_ctx.reset(token)
    else:
        correlation_id_ctx.set("")
