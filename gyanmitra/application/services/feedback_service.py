"""
Feedback ledger.

At most one rating per (conversation, message position, user). There is no
read-before-write: the insert is attempted and the database's unique
constraint decides concurrent submissions; the loser receives a conflict
carrying the record that won.

Dependencies: sqlalchemy, gyanmitra.boundary.db, gyanmitra.models
System role: Feedback use case orchestration
"""

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from gyanmitra.application.services.history_service import validate_page
from gyanmitra.boundary.db.CRUD.conversation_crud import conversation_crud
from gyanmitra.boundary.db.CRUD.feedback_crud import feedback_crud
from gyanmitra.boundary.db.models.feedback_model import FeedbackModel
from gyanmitra.core.exceptions import ConflictError, NotFoundOrForbiddenError, ValidationError
from gyanmitra.models.common import Pagination
from gyanmitra.models.conversation import MessageRole
from gyanmitra.models.feedback import (
    MAX_COMMENT_LENGTH,
    FeedbackContext,
    FeedbackConversationSummary,
    FeedbackData,
    FeedbackHistoryItem,
    FeedbackListResponse,
    FeedbackRating,
    SubmitFeedbackRequest,
    UpdateFeedbackRequest,
)

logger = logging.getLogger(__name__)

DEFAULT_FEEDBACK_PAGE_SIZE = 20
DUPLICATE_MESSAGE = "You have already provided feedback for this message"


def normalize_rating(rating: str | None) -> str:
    """
    Lower-case and validate a rating.

    Raises:
        ValidationError: If not positive/negative
    """
    value = (rating or "").strip().lower()
    if value not in {r.value for r in FeedbackRating}:
        raise ValidationError('rating must be either "positive" or "negative"', field="rating")
    return value


def normalize_comment(comment: str | None) -> str | None:
    """
    Trim a comment; empty becomes None.

    Raises:
        ValidationError: If longer than 500 characters after trimming
    """
    if comment is None:
        return None
    comment = comment.strip()
    if len(comment) > MAX_COMMENT_LENGTH:
        raise ValidationError(
            f"comment cannot exceed {MAX_COMMENT_LENGTH} characters", field="comment"
        )
    return comment or None


def to_feedback_data(feedback: FeedbackModel) -> FeedbackData:
    return FeedbackData(
        id=feedback.id,
        rating=FeedbackRating(feedback.rating),
        comment=feedback.comment,
        timestamp=feedback.created_at,
    )


class FeedbackLedger:
    """Feedback use case orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize feedback ledger with async database session.

        Args:
            db: Async SQLAlchemy session
        """
        self.db = db

    async def submit(self, user_id: UUID, request: SubmitFeedbackRequest) -> FeedbackData:
        """
        Record a rating on an assistant message.

        Flow:
        1. Validate fields (nothing written on failure)
        2. Load the conversation for its owner
        3. Check the index references an assistant message
        4. Insert; a unique violation becomes ConflictError

        Args:
            user_id: Rater
            request: Submission payload

        Returns:
            FeedbackData: The new record

        Raises:
            ValidationError: Bad fields, index out of range, or not an assistant message
            NotFoundOrForbiddenError: Conversation missing or not owned
            ConflictError: The slot is already rated; carries the existing record
        """
        if request.conversation_id is None:
            raise ValidationError("conversationId is required", field="conversationId")
        if request.message_index is None:
            raise ValidationError("messageIndex is required", field="messageIndex")
        if request.message_index < 0:
            raise ValidationError(
                "messageIndex must be a non-negative number", field="messageIndex"
            )
        rating = normalize_rating(request.rating)
        comment = normalize_comment(request.comment)

        conversation = await conversation_crud.get_for_owner(
            self.db, request.conversation_id, user_id
        )
        if conversation is None:
            raise NotFoundOrForbiddenError("Conversation", request.conversation_id)

        messages = conversation.messages
        index = request.message_index
        if index >= len(messages):
            raise ValidationError(
                f"Invalid messageIndex. This conversation has {len(messages)} messages",
                field="messageIndex",
            )
        if messages[index].role != MessageRole.ASSISTANT.value:
            raise ValidationError(
                "Feedback can only be given on AI responses (assistant messages)",
                field="messageIndex",
            )

        context = FeedbackContext(
            query=messages[index - 1].content if index > 0 else None,
            subject=conversation.subject,
            grade=conversation.grade,
            language=conversation.language,
        )

        try:
            feedback = await feedback_crud.create(
                self.db,
                conversation_id=conversation.id,
                message_index=index,
                user_id=user_id,
                rating=rating,
                comment=comment,
                context=context.model_dump(mode="json"),
                reviewed=False,
            )
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            existing = await feedback_crud.get_for_message(
                self.db, request.conversation_id, index, user_id
            )
            if existing is None:
                raise
            logger.info(
                "Duplicate feedback rejected",
                extra={"conversation_id": str(request.conversation_id), "message_index": index},
            )
            raise ConflictError(
                DUPLICATE_MESSAGE,
                existing=to_feedback_data(existing).model_dump(
                    mode="json", include={"rating", "comment", "timestamp"}
                ),
            ) from e

        logger.info(
            "Feedback recorded",
            extra={
                "feedback_id": str(feedback.id),
                "conversation_id": str(conversation.id),
                "message_index": index,
                "rating": rating,
            },
        )
        return to_feedback_data(feedback)

    async def update(
        self,
        feedback_id: UUID,
        user_id: UUID,
        request: UpdateFeedbackRequest,
    ) -> FeedbackData:
        """
        Change the rating and/or comment of one's own feedback.

        An empty rating is ignored; an empty comment clears it.

        Raises:
            NotFoundOrForbiddenError: If missing or submitted by someone else
            ValidationError: On invalid rating or comment
        """
        feedback = await self._get_owned(feedback_id, user_id)

        rating = normalize_rating(request.rating) if request.rating else None
        comment_given = "comment" in request.model_fields_set
        comment = normalize_comment(request.comment) if comment_given else None

        if rating is not None:
            feedback.rating = rating
        if comment_given:
            feedback.comment = comment
        await self.db.commit()

        logger.info("Feedback updated", extra={"feedback_id": str(feedback_id)})
        return to_feedback_data(feedback)

    async def delete(self, feedback_id: UUID, user_id: UUID) -> None:
        """
        Remove one's own feedback.

        Raises:
            NotFoundOrForbiddenError: If missing or submitted by someone else
        """
        await self._get_owned(feedback_id, user_id)
        await feedback_crud.delete_by_id(self.db, feedback_id)
        await self.db.commit()
        logger.info("Feedback deleted", extra={"feedback_id": str(feedback_id)})

    async def list_mine(
        self,
        user_id: UUID,
        page: int = 1,
        limit: int = DEFAULT_FEEDBACK_PAGE_SIZE,
        rating: str | None = None,
    ) -> FeedbackListResponse:
        """
        Page through one's own feedback, newest first.

        Raises:
            ValidationError: On out-of-range paging or an unknown rating filter
        """
        validate_page(page, limit)
        rating = normalize_rating(rating) if rating else None

        records, total = await feedback_crud.list_for_owner(
            self.db, user_id, rating=rating, limit=limit, offset=(page - 1) * limit
        )
        return FeedbackListResponse(
            data=[self._to_history_item(f) for f in records],
            pagination=Pagination.build(page, limit, total),
        )

    async def _get_owned(self, feedback_id: UUID, user_id: UUID) -> FeedbackModel:
        feedback = await feedback_crud.get_for_owner(self.db, feedback_id, user_id)
        if feedback is None:
            raise NotFoundOrForbiddenError("Feedback", feedback_id)
        return feedback

    @staticmethod
    def _to_history_item(feedback: FeedbackModel) -> FeedbackHistoryItem:
        conversation = feedback.conversation
        return FeedbackHistoryItem(
            id=feedback.id,
            conversation_id=feedback.conversation_id,
            message_index=feedback.message_index,
            rating=FeedbackRating(feedback.rating),
            comment=feedback.comment,
            context=FeedbackContext.model_validate(feedback.context or {}),
            reviewed=feedback.reviewed,
            timestamp=feedback.created_at,
            conversation=(
                FeedbackConversationSummary(
                    id=conversation.id,
                    title=conversation.title,
                    grade=conversation.grade,
                    subject=conversation.subject,
                    language=conversation.language,
                )
                if conversation is not None
                else None
            ),
        )
