"""
History service.

Paginated conversation previews for the history sidebar, plus recency
grouping of a page of previews.

Dependencies: sqlalchemy, gyanmitra.boundary.db, gyanmitra.core.recency
System role: Conversation history use case
"""

import logging
from datetime import datetime, tzinfo
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from gyanmitra.application.services.conversation_service import ConversationService
from gyanmitra.boundary.db.CRUD.conversation_crud import conversation_crud
from gyanmitra.core.exceptions import ValidationError
from gyanmitra.core.recency import RecencyBucket, group_by_recency
from gyanmitra.core.taxonomy import MAX_GRADE, MIN_GRADE
from gyanmitra.models.common import Pagination
from gyanmitra.models.conversation import (
    ConversationListResponse,
    ConversationPreview,
    ConversationStatus,
)

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 50


def validate_page(page: int, limit: int, max_limit: int = MAX_PAGE_SIZE) -> None:
    """
    Check pagination parameters.

    Raises:
        ValidationError: If page < 1 or limit outside 1..max_limit
    """
    if page < 1:
        raise ValidationError("page must be 1 or greater", field="page")
    if limit < 1 or limit > max_limit:
        raise ValidationError(f"limit must be between 1 and {max_limit}", field="limit")


class HistoryPaginator:
    """Conversation history use case."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.conversations = ConversationService(db)

    async def list_conversations(
        self,
        user_id: UUID,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
        status: str = ConversationStatus.ACTIVE.value,
        subject: str | None = None,
        grade: int | None = None,
    ) -> ConversationListResponse:
        """
        List a page of the user's conversations, most recently updated first.

        Args:
            user_id: Owner
            page: 1-based page number
            limit: Page size, 1-50
            status: "active" (default) or "archived"
            subject: Optional client subject filter (case-insensitive)
            grade: Optional grade filter

        Returns:
            ConversationListResponse: Previews and pagination block

        Raises:
            ValidationError: On out-of-range parameters
        """
        validate_page(page, limit)

        status = (status or ConversationStatus.ACTIVE.value).lower()
        if status not in {s.value for s in ConversationStatus}:
            raise ValidationError("status must be 'active' or 'archived'", field="status")
        if grade is not None and not MIN_GRADE <= grade <= MAX_GRADE:
            raise ValidationError(
                f"Grade must be between {MIN_GRADE} and {MAX_GRADE}", field="grade"
            )

        conversations, total = await conversation_crud.list_for_owner(
            self.db,
            user_id=user_id,
            status=status,
            subject=subject.strip().lower() if subject else None,
            grade=grade,
            limit=limit,
            offset=(page - 1) * limit,
        )

        logger.info(
            "Conversation history listed",
            extra={"user_id": str(user_id), "page": page, "returned": len(conversations), "total": total},
        )
        return ConversationListResponse(
            data=[self.conversations.to_preview(c) for c in conversations],
            pagination=Pagination.build(page, limit, total),
        )

    @staticmethod
    def group(
        previews: list[ConversationPreview],
        now: datetime | None = None,
        tz: tzinfo | None = None,
    ) -> dict[RecencyBucket, list[ConversationPreview]]:
        """Group previews into Today / Yesterday / Last 7 Days / Older."""
        return group_by_recency(previews, now=now, tz=tz)
