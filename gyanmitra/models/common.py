"""
Common response models and utilities.

Generic response wrappers, pagination block and error schema. API models
use camelCase on the wire and accept snake_case when populated in code.

Dependencies: pydantic
System role: Common API response structures
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        """Dump as a JSON-ready dict using wire aliases."""
        return self.model_dump(by_alias=True, mode="json")


class Pagination(CamelModel):
    """Pagination block returned by list endpoints."""

    page: int
    limit: int
    total: int
    total_pages: int
    has_more: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        """
        Compute the pagination block for a page request.

        has_more is false exactly when page * limit >= total.
        """
        total_pages = (total + limit - 1) // limit if limit else 0
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_more=page * limit < total,
        )


class ErrorResponse(CamelModel):
    """Error response schema."""

    success: bool = False
    error: str = Field(description="Error message")
    details: dict | None = Field(default=None, description="Additional error context")
    conversation_id: str | None = Field(
        default=None,
        description="Conversation that already holds the question (upstream failures)",
    )
    existing_feedback: dict | None = Field(
        default=None,
        description="Previously recorded feedback (duplicate submissions)",
    )


class MessageResponse(CamelModel):
    """Plain success acknowledgement."""

    success: bool = True
    message: str
