"""
Core business logic module.

Domain vocabulary, exception hierarchy, citation formatting and history
grouping. Nothing here touches the database or the network.
"""

from gyanmitra.core.exceptions import (
    AuthError,
    ConflictError,
    GyanMitraException,
    InternalError,
    NotFoundOrForbiddenError,
    UpstreamFailure,
    UpstreamUnavailableError,
    ValidationError,
)

__all__ = [
    "GyanMitraException",
    "ValidationError",
    "AuthError",
    "NotFoundOrForbiddenError",
    "ConflictError",
    "UpstreamFailure",
    "UpstreamUnavailableError",
    "InternalError",
]
