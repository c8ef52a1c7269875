"""
Conversation ORM model.

Owns the message log for one grade/subject/language thread. Saves are
version-checked: every append bumps ``updated_at``, which issues an UPDATE
guarded by ``version_id``, so a writer holding a stale copy fails instead
of silently dropping a turn.

Dependencies: sqlalchemy, gyanmitra.boundary.db.base
System role: Conversation aggregate persistence
"""

from uuid import UUID

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gyanmitra.boundary.db.base import Base, TimestampMixin, UUIDMixin, utc_now
from gyanmitra.boundary.db.models.message_model import MessageModel

DEFAULT_TITLE = "New Conversation"
TITLE_PREVIEW_LENGTH = 50
MAX_TITLE_LENGTH = 100


def derive_title(content: str) -> str:
    """Title from the first user message: first 50 chars, '...' when cut."""
    content = content.strip()
    if len(content) > TITLE_PREVIEW_LENGTH:
        return content[:TITLE_PREVIEW_LENGTH] + "..."
    return content or DEFAULT_TITLE


class ConversationModel(Base, UUIDMixin, TimestampMixin):
    """
    Conversation ORM model.

    Attributes:
        id: UUID primary key
        user_id: Owner
        title: Derived once from the first user message
        grade: Grade fixed at creation
        subject: Client subject value fixed at creation
        language: Resolved language fixed at creation
        status: "active" or "archived"
        version_id: Optimistic concurrency counter
        messages: Turns ordered by position

    Relationships:
        messages: One-to-many with MessageModel (cascade delete)
    """

    __tablename__ = "conversations"
    __table_args__ = (
        Index("ix_conversations_owner_status_updated", "user_id", "status", "updated_at"),
    )

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    title: Mapped[str] = mapped_column(
        String(MAX_TITLE_LENGTH),
        nullable=False,
        default=DEFAULT_TITLE,
    )

    grade: Mapped[int] = mapped_column(Integer, nullable=False)

    subject: Mapped[str] = mapped_column(String(50), nullable=False)

    language: Mapped[str] = mapped_column(String(20), nullable=False)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")

    version_id: Mapped[int] = mapped_column(Integer, nullable=False)

    messages: Mapped[list[MessageModel]] = relationship(
        "MessageModel",
        back_populates="conversation",
        cascade="all, delete-orphan",
        order_by="MessageModel.position",
    )

    __mapper_args__ = {"version_id_col": version_id}

    @property
    def message_count(self) -> int:
        return len(self.messages)

    @property
    def last_message(self) -> MessageModel | None:
        return self.messages[-1] if self.messages else None

    def add_message(self, message: MessageModel) -> MessageModel:
        """
        Append a turn at the next position.

        The first user message sets the title. updated_at is bumped
        explicitly so the save always carries the version check.

        Args:
            message: Unattached message row

        Returns:
            MessageModel: The appended message
        """
        is_first = not self.messages
        message.position = len(self.messages)
        self.messages.append(message)

        if is_first and message.role == "user":
            self.title = derive_title(message.content)

        self.updated_at = utc_now()
        return message
