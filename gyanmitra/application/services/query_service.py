"""
Query orchestrator.

Turns an inbound question into a persisted, citation-annotated conversation
turn: validate, resolve language, load or start the conversation, append
the question, call the answer service, append the answer, save once.

If the answer service fails, the conversation is saved holding only the
question and the failure is re-raised with the conversation id so the
client can retry in the same thread.

Dependencies: sqlalchemy, gyanmitra.boundary, gyanmitra.core, gyanmitra.models
System role: Query use case orchestration
"""

import logging
import time
from collections.abc import AsyncGenerator
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from gyanmitra.application.services.conversation_service import ConversationService
from gyanmitra.boundary.db.models.user_model import UserModel
from gyanmitra.boundary.inference.client import InferenceClient
from gyanmitra.core.exceptions import GyanMitraException, UpstreamUnavailableError, ValidationError
from gyanmitra.core.taxonomy import (
    MAX_GRADE,
    MIN_GRADE,
    SUPPORTED_LANGUAGES,
    SUPPORTED_SUBJECTS,
    is_supported_language,
    is_supported_subject,
    map_subject,
    resolve_language,
)
from gyanmitra.core.text_chunks import word_chunks
from gyanmitra.models.query import InferenceRequest, QueryMetadata, QueryRequest, QueryResponse
from gyanmitra.models.streaming import StreamEvent, StreamEventType
from gyanmitra.observability.log_utils import safe_log_value

logger = logging.getLogger(__name__)

MAX_QUERY_LENGTH = 500
DEFAULT_TOP_K = 5
MIN_TOP_K = 1
MAX_TOP_K = 10


@dataclass(frozen=True)
class ValidatedQuery:
    """Query fields after validation and normalization."""

    query: str
    grade: int
    subject: str
    language: str | None
    top_k: int


def validate_query(request: QueryRequest) -> ValidatedQuery:
    """
    Validate a query request before anything is written.

    Args:
        request: Raw request

    Returns:
        ValidatedQuery: Trimmed query, lower-cased subject/language, clamped top_k

    Raises:
        ValidationError: On empty/long query, bad grade, subject or language
    """
    query = (request.query or "").strip()
    if not query:
        raise ValidationError("Query text is required", field="query")
    if len(query) > MAX_QUERY_LENGTH:
        raise ValidationError(
            f"Query is too long (max {MAX_QUERY_LENGTH} characters)", field="query"
        )

    if request.grade is None or not MIN_GRADE <= request.grade <= MAX_GRADE:
        raise ValidationError(
            f"Grade must be between {MIN_GRADE} and {MAX_GRADE}", field="grade"
        )

    if not is_supported_subject(request.subject):
        raise ValidationError(
            f"Subject must be one of: {', '.join(SUPPORTED_SUBJECTS)}", field="subject"
        )

    language = None
    if request.language is not None and request.language.strip():
        if not is_supported_language(request.language):
            raise ValidationError(
                f"Language must be one of: {', '.join(SUPPORTED_LANGUAGES)}", field="language"
            )
        language = request.language.strip().lower()

    top_k = DEFAULT_TOP_K if not request.top_k else min(max(request.top_k, MIN_TOP_K), MAX_TOP_K)

    return ValidatedQuery(
        query=query,
        grade=request.grade,
        subject=request.subject.strip().lower(),
        language=language,
        top_k=top_k,
    )


class QueryOrchestrator:
    """
    Query orchestrator.

    Coordinates validation, language resolution, conversation persistence
    and the answer-service call for one question.
    """

    def __init__(
        self,
        db: AsyncSession,
        inference_client: InferenceClient,
        conversations: ConversationService | None = None,
    ) -> None:
        """
        Initialize query orchestrator.

        Args:
            db: AsyncSession for database operations
            inference_client: Answer-service client
            conversations: Conversation service (defaults to one on db)
        """
        self.db = db
        self.inference_client = inference_client
        self.conversations = conversations or ConversationService(db)

    async def process_query(self, request: QueryRequest, user: UserModel) -> QueryResponse:
        """
        Answer a question and record the turn.

        Args:
            request: Question with grade, subject, optional language/conversation
            user: Authenticated user (source of the preferred language)

        Returns:
            QueryResponse: Answer, citations, and turn metadata

        Raises:
            ValidationError: Invalid input; nothing is written
            NotFoundOrForbiddenError: conversationId missing or not owned
            UpstreamUnavailableError: Answer service failed; question is saved
            ConflictError: The conversation was saved concurrently
        """
        validated = validate_query(request)
        language = resolve_language(user.preferred_language, validated.language)

        if request.conversation_id is not None:
            conversation = await self.conversations.get_for_owner(request.conversation_id, user.id)
            is_new = False
        else:
            conversation = self.conversations.start(
                user.id, validated.grade, validated.subject, language
            )
            is_new = True

        logger.info(
            "Processing query",
            extra={
                "user_id": str(user.id),
                "conversation_id": str(conversation.id),
                "is_new_conversation": is_new,
                "language": language,
                "query": safe_log_value(validated.query, 50),
            },
        )

        self.conversations.append_user_message(conversation, validated.query)

        mapped_subject = map_subject(validated.subject)
        start_time = time.perf_counter()
        try:
            answer = await self.inference_client.query(
                InferenceRequest(
                    query=validated.query,
                    grade=validated.grade,
                    subject=mapped_subject,
                    language=language,
                    top_k=validated.top_k,
                )
            )
        except UpstreamUnavailableError as e:
            await self.conversations.save(conversation)
            logger.warning(
                "Question saved without answer",
                extra={"conversation_id": str(conversation.id), "kind": e.kind.value},
            )
            raise e.with_conversation(conversation.id)

        latency_ms = int((time.perf_counter() - start_time) * 1000)

        self.conversations.append_assistant_message(conversation, answer, language, latency_ms)
        await self.conversations.save(conversation)

        logger.info(
            "Query answered",
            extra={
                "conversation_id": str(conversation.id),
                "latency_ms": latency_ms,
                "citations": len(answer.citations),
            },
        )

        return QueryResponse(
            conversation_id=conversation.id,
            is_new_conversation=is_new,
            answer=answer.answer,
            citations=answer.citations,
            source_chunks=answer.source_chunks,
            language=language,
            in_scope=answer.in_scope,
            metadata=QueryMetadata(
                latency_ms=latency_ms,
                message_count=conversation.message_count,
                model_id=answer.model_id,
                confidence=answer.confidence,
                tokens_used=answer.tokens_used,
                chunks_retrieved=answer.chunks_retrieved,
                processing_time_ms=answer.processing_time_ms,
                grade=answer.grade or validated.grade,
                subject=answer.subject or mapped_subject,
            ),
        )

    async def stream_query(
        self,
        request: QueryRequest,
        user: UserModel,
    ) -> AsyncGenerator[StreamEvent, None]:
        """
        Run the query workflow, then replay the answer as stream events.

        Yields token events (one per whitespace-delimited chunk), one
        citation event per citation, then a done event. Failures become a
        single error event carrying the conversation id when one exists.

        Args:
            request: Question payload
            user: Authenticated user

        Yields:
            StreamEvent: token, citation, done, or error events
        """
        try:
            response = await self.process_query(request, user)
        except GyanMitraException as e:
            data = {"error": e.message}
            conversation_id = getattr(e, "conversation_id", None)
            if conversation_id is not None:
                data["conversationId"] = str(conversation_id)
            yield StreamEvent(type=StreamEventType.ERROR, data=data)
            return
        except Exception:
            logger.exception("Streamed query failed")
            yield StreamEvent(type=StreamEventType.ERROR, data={"error": "Failed to process query"})
            return

        for chunk in word_chunks(response.answer):
            yield StreamEvent(type=StreamEventType.TOKEN, data={"content": chunk})

        for citation in response.citations:
            yield StreamEvent(type=StreamEventType.CITATION, data={"citation": citation.to_wire()})

        wire = response.to_wire()
        yield StreamEvent(
            type=StreamEventType.DONE,
            data={
                "conversationId": wire["conversationId"],
                "isNewConversation": wire["isNewConversation"],
                "language": wire["language"],
                "inScope": wire["inScope"],
                "sourceChunks": wire["sourceChunks"],
                "metadata": wire["metadata"],
            },
        )
