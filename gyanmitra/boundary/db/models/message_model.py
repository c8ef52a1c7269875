"""
Conversation message ORM model.

One row per turn. ``position`` is the message index clients refer to; a
unique constraint on (conversation_id, position) makes two writers racing
to append the same turn collide at the database.

Dependencies: sqlalchemy, gyanmitra.boundary.db.base
System role: Message persistence
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gyanmitra.boundary.db.base import Base, UUIDMixin, utc_now


class MessageModel(Base, UUIDMixin):
    """
    Message ORM model.

    Attributes:
        conversation_id: Owning conversation
        position: 0-based turn index, never reassigned
        role: "user" or "assistant"
        content: Message text
        citations: Serialized citations (assistant only)
        source_chunks: Serialized source chunks (assistant only)
        message_metadata: Generation metadata (assistant only)
        timestamp: When the turn was recorded
    """

    __tablename__ = "conversation_messages"
    __table_args__ = (
        UniqueConstraint("conversation_id", "position", name="uq_message_position"),
    )

    conversation_id: Mapped[UUID] = mapped_column(
        ForeignKey("conversations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    position: Mapped[int] = mapped_column(Integer, nullable=False)

    role: Mapped[str] = mapped_column(String(20), nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    citations: Mapped[list | None] = mapped_column(JSON, nullable=True, default=None)

    source_chunks: Mapped[list | None] = mapped_column(JSON, nullable=True, default=None)

    message_metadata: Mapped[dict | None] = mapped_column(JSON, nullable=True, default=None)

    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    conversation = relationship("ConversationModel", back_populates="messages")
