"""
Client-side error mapping.

Turns API error responses back into the domain exception hierarchy so SDK
callers handle the same exception types the service raises.

Dependencies: httpx, gyanmitra.core.exceptions
System role: HTTP error translation for the client SDK
"""

from typing import Any

import httpx

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


class StreamFailedError(GyanMitraException):
    """Raised when the server reports a failure inside the event stream."""

    def __init__(self, message: str, conversation_id: str | None = None) -> None:
        self.conversation_id = conversation_id
        super().__init__(message)


def _body(response: httpx.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def raise_for_api_error(response: httpx.Response) -> None:
    """
    Raise the domain exception matching an error response.

    Args:
        response: Response whose body has been read

    Raises:
        GyanMitraException: Subclass chosen by status code
    """
    if response.is_success:
        return

    body = _body(response)
    message = body.get("error") or f"Request failed with status {response.status_code}"
    status = response.status_code

    if status == 400:
        raise ValidationError(message, details=body.get("details"))
    if status == 401:
        raise AuthError()
    if status == 404:
        raise NotFoundOrForbiddenError("Resource")
    if status == 409:
        raise ConflictError(message, existing=body.get("existingFeedback"))
    if status == 503:
        raise UpstreamUnavailableError(
            message,
            kind=UpstreamFailure.UPSTREAM_ERROR,
            upstream_status=status,
            conversation_id=body.get("conversationId"),
        )
    raise InternalError(message, details={"status_code": status})
