"""
Conversation service orchestrator.

Owns the conversation aggregate: creation, message appends, owner-scoped
loading, archive/restore, and conversion to API shapes. Saves are whole
aggregate commits; a lost race on the version check or on a message
position surfaces as ConflictError.

Dependencies: sqlalchemy, gyanmitra.boundary.db, gyanmitra.models
System role: Conversation use case orchestration
"""

import logging
import uuid
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from gyanmitra.boundary.db.CRUD.conversation_crud import conversation_crud
from gyanmitra.boundary.db.models.conversation_model import DEFAULT_TITLE, ConversationModel
from gyanmitra.boundary.db.models.message_model import MessageModel
from gyanmitra.core.exceptions import ConflictError, NotFoundOrForbiddenError, ValidationError
from gyanmitra.models.citation import Citation, SourceChunk
from gyanmitra.models.conversation import (
    AssistantMessage,
    AssistantMessageMetadata,
    ConversationDetail,
    ConversationMetadata,
    ConversationPreview,
    ConversationStatus,
    ConversationStatusData,
    LastMessagePreview,
    MessageRole,
    UserMessage,
)
from gyanmitra.models.query import InferenceAnswer

logger = logging.getLogger(__name__)

LAST_MESSAGE_PREVIEW_LENGTH = 100


class ConversationService:
    """Conversation service orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize conversation service with async database session.

        Args:
            db: Async SQLAlchemy session
        """
        self.db = db

    def start(self, user_id: UUID, grade: int, subject: str, language: str) -> ConversationModel:
        """
        Build a new conversation and attach it to the session.

        The id is assigned up front so it is known before the first save.
        Nothing is written until save().
        """
        conversation = ConversationModel(
            id=uuid.uuid4(),
            user_id=user_id,
            title=DEFAULT_TITLE,
            grade=grade,
            subject=subject.lower(),
            language=language.lower(),
            status=ConversationStatus.ACTIVE.value,
            messages=[],
        )
        self.db.add(conversation)
        return conversation

    async def get_for_owner(self, conversation_id: UUID, user_id: UUID) -> ConversationModel:
        """
        Load a conversation with its messages.

        Raises:
            NotFoundOrForbiddenError: If missing or owned by someone else
        """
        conversation = await conversation_crud.get_for_owner(self.db, conversation_id, user_id)
        if conversation is None:
            raise NotFoundOrForbiddenError("Conversation", conversation_id)
        return conversation

    def append_user_message(self, conversation: ConversationModel, content: str) -> MessageModel:
        """Append the student's (already trimmed) question."""
        return conversation.add_message(
            MessageModel(
                role=MessageRole.USER.value,
                content=content,
                timestamp=datetime.now(timezone.utc),
            )
        )

    def append_assistant_message(
        self,
        conversation: ConversationModel,
        answer: InferenceAnswer,
        language: str,
        latency_ms: int,
    ) -> MessageModel:
        """Append the service's answer with citations and generation metadata."""
        metadata = AssistantMessageMetadata(
            language=language,
            in_scope=answer.in_scope,
            latency_ms=latency_ms,
            model_id=answer.model_id,
            confidence=answer.confidence,
            tokens_used=answer.tokens_used,
            chunks_retrieved=answer.chunks_retrieved,
            processing_time_ms=answer.processing_time_ms,
        )
        return conversation.add_message(
            MessageModel(
                role=MessageRole.ASSISTANT.value,
                content=answer.answer,
                citations=[c.model_dump(mode="json") for c in answer.citations],
                source_chunks=[s.model_dump(mode="json") for s in answer.source_chunks],
                message_metadata=metadata.model_dump(mode="json"),
                timestamp=datetime.now(timezone.utc),
            )
        )

    async def save(self, conversation: ConversationModel) -> None:
        """
        Commit the aggregate.

        Raises:
            ConflictError: If another writer saved the conversation first
        """
        conversation_id = str(conversation.id)
        try:
            await self.db.commit()
        except (StaleDataError, IntegrityError) as e:
            await self.db.rollback()
            logger.warning(
                "Concurrent conversation write rejected",
                extra={"conversation_id": conversation_id, "error": type(e).__name__},
            )
            raise ConflictError(
                "Conversation was updated by another request. Please reload and try again.",
                details={"conversation_id": conversation_id},
            ) from e

    async def get_detail(self, conversation_id: UUID, user_id: UUID) -> ConversationDetail:
        """Full conversation for its owner."""
        return self.to_detail(await self.get_for_owner(conversation_id, user_id))

    async def archive(self, conversation_id: UUID, user_id: UUID) -> ConversationStatusData:
        """
        Soft-delete a conversation.

        Raises:
            NotFoundOrForbiddenError: If missing or not owned
            ValidationError: If it is already archived
        """
        return await self._transition(
            conversation_id, user_id, ConversationStatus.ACTIVE, ConversationStatus.ARCHIVED
        )

    async def restore(self, conversation_id: UUID, user_id: UUID) -> ConversationStatusData:
        """
        Bring an archived conversation back to the active list.

        Raises:
            NotFoundOrForbiddenError: If missing or not owned
            ValidationError: If it is already active
        """
        return await self._transition(
            conversation_id, user_id, ConversationStatus.ARCHIVED, ConversationStatus.ACTIVE
        )

    async def _transition(
        self,
        conversation_id: UUID,
        user_id: UUID,
        source: ConversationStatus,
        target: ConversationStatus,
    ) -> ConversationStatusData:
        conversation = await self.get_for_owner(conversation_id, user_id)
        if conversation.status != source.value:
            raise ValidationError(
                f"Conversation is already {conversation.status}",
                field="status",
            )

        conversation.status = target.value
        await self.save(conversation)
        logger.info(
            "Conversation status changed",
            extra={"conversation_id": str(conversation_id), "status": target.value},
        )
        return ConversationStatusData(id=conversation.id, status=target)

    @staticmethod
    def to_message(conversation: ConversationModel, message: MessageModel):
        """Convert a stored message to its API variant."""
        if message.role == MessageRole.USER.value:
            return UserMessage(content=message.content, timestamp=message.timestamp)

        metadata = message.message_metadata or {"language": conversation.language}
        return AssistantMessage(
            content=message.content,
            citations=[Citation.model_validate(c) for c in message.citations or []],
            source_chunks=[SourceChunk.model_validate(s) for s in message.source_chunks or []],
            timestamp=message.timestamp,
            metadata=AssistantMessageMetadata.model_validate(metadata),
        )

    @staticmethod
    def to_metadata(conversation: ConversationModel) -> ConversationMetadata:
        return ConversationMetadata(
            grade=conversation.grade,
            subject=conversation.subject,
            language=conversation.language,
        )

    def to_detail(self, conversation: ConversationModel) -> ConversationDetail:
        return ConversationDetail(
            id=conversation.id,
            title=conversation.title,
            metadata=self.to_metadata(conversation),
            messages=[self.to_message(conversation, m) for m in conversation.messages],
            status=ConversationStatus(conversation.status),
            message_count=conversation.message_count,
            created_at=conversation.created_at,
            updated_at=conversation.updated_at,
        )

    def to_preview(self, conversation: ConversationModel) -> ConversationPreview:
        last = conversation.last_message
        return ConversationPreview(
            id=conversation.id,
            title=conversation.title,
            metadata=self.to_metadata(conversation),
            status=ConversationStatus(conversation.status),
            message_count=conversation.message_count,
            last_message=(
                LastMessagePreview(
                    content=last.content[:LAST_MESSAGE_PREVIEW_LENGTH],
                    timestamp=last.timestamp,
                )
                if last is not None
                else None
            ),
            created_at=conversation.created_at,
            updated_at=conversation.updated_at,
        )
