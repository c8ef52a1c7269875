"""
Feedback ORM model.

At most one rating per (conversation, message position, user), enforced by
a unique constraint so concurrent submissions are decided by the database.

Dependencies: sqlalchemy, gyanmitra.boundary.db.base
System role: Feedback persistence
"""

from uuid import UUID

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gyanmitra.boundary.db.base import Base, TimestampMixin, UUIDMixin

FEEDBACK_UNIQUE_CONSTRAINT = "uq_feedback_message_user"


class FeedbackModel(Base, UUIDMixin, TimestampMixin):
    """
    Feedback ORM model.

    Attributes:
        conversation_id: Rated conversation
        message_index: Position of the rated assistant message
        user_id: Rater
        rating: "positive" or "negative"
        comment: Optional comment, at most 500 chars
        context: Snapshot {query, subject, grade, language} at rating time
        reviewed: Set by moderators, false on creation
        created_at: Used as the feedback timestamp
    """

    __tablename__ = "feedback"
    __table_args__ = (
        UniqueConstraint(
            "conversation_id",
            "message_index",
            "user_id",
            name=FEEDBACK_UNIQUE_CONSTRAINT,
        ),
    )

    conversation_id: Mapped[UUID] = mapped_column(
        ForeignKey("conversations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    message_index: Mapped[int] = mapped_column(Integer, nullable=False)

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    rating: Mapped[str] = mapped_column(String(10), nullable=False)

    comment: Mapped[str | None] = mapped_column(String(500), nullable=True, default=None)

    context: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    reviewed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    conversation = relationship("ConversationModel")
