"""
Feedback domain models and schemas.

Dependencies: pydantic
System role: Feedback API contracts
"""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import Field

from gyanmitra.models.common import CamelModel, Pagination

MAX_COMMENT_LENGTH = 500


class FeedbackRating(str, Enum):
    """Allowed ratings."""

    POSITIVE = "positive"
    NEGATIVE = "negative"


class SubmitFeedbackRequest(CamelModel):
    """Request schema for rating an assistant message."""

    conversation_id: UUID | None = None
    message_index: int | None = None
    rating: str | None = None
    comment: str | None = None


class UpdateFeedbackRequest(CamelModel):
    """Request schema for changing a rating or comment."""

    rating: str | None = None
    comment: str | None = Field(default=None, description="Empty string clears the comment")


class FeedbackContext(CamelModel):
    """Snapshot of the question being rated, for downstream triage."""

    query: str | None = None
    subject: str | None = None
    grade: int | None = None
    language: str | None = None


class FeedbackData(CamelModel):
    """Feedback record as returned after submit/update."""

    id: UUID
    rating: FeedbackRating
    comment: str | None = None
    timestamp: datetime


class FeedbackResponse(CamelModel):
    """Submit/update response."""

    success: bool = True
    message: str
    data: FeedbackData


class FeedbackConversationSummary(CamelModel):
    """Conversation fields shown next to a feedback history entry."""

    id: UUID
    title: str
    grade: int
    subject: str
    language: str


class FeedbackHistoryItem(CamelModel):
    """Feedback history entry."""

    id: UUID
    conversation_id: UUID
    message_index: int
    rating: FeedbackRating
    comment: str | None = None
    context: FeedbackContext
    reviewed: bool
    timestamp: datetime
    conversation: FeedbackConversationSummary | None = None


class FeedbackListResponse(CamelModel):
    """Paginated feedback history."""

    success: bool = True
    data: list[FeedbackHistoryItem]
    pagination: Pagination
