"""
Test suite for QueryOrchestrator.

Tests new and follow-up turns, language resolution, validation before any
write, and the save-then-raise behaviour on answer-service failures. Runs
against in-memory SQLite with the answer service behind a MockTransport.

System role: Verification of the query use case
"""

import json
import uuid

import httpx
import pytest
from sqlalchemy import func, select

from gyanmitra.application.services.query_service import QueryOrchestrator, validate_query
from gyanmitra.boundary.db import ConversationModel, conversation_crud
from gyanmitra.core.exceptions import (
    NotFoundOrForbiddenError,
    UpstreamFailure,
    UpstreamUnavailableError,
    ValidationError,
)
from gyanmitra.models.query import QueryRequest
from gyanmitra.models.streaming import StreamEventType
from tests.support import ANSWER_PAYLOAD, answer_handler, offline_handler


def _request(**overrides) -> QueryRequest:
    fields = {"query": "What is photosynthesis?", "grade": 7, "subject": "science"}
    fields.update(overrides)
    return QueryRequest(**fields)


@pytest.fixture
def orchestrator_for(db_session, make_inference_client):
    """Build an orchestrator on the test session with a given answer-service handler."""

    def build(handler=answer_handler()) -> QueryOrchestrator:
        return QueryOrchestrator(db=db_session, inference_client=make_inference_client(handler))

    return build


class TestValidateQuery:
    """Test suite for validate_query."""

    def test_should_trim_and_lowercase(self) -> None:
        validated = validate_query(_request(query="  Hi  ", subject="Science", language="HINDI"))

        assert validated.query == "Hi"
        assert validated.subject == "science"
        assert validated.language == "hindi"

    @pytest.mark.parametrize(
        "top_k,expected",
        [(None, 5), (0, 5), (-3, 1), (3, 3), (50, 10)],
    )
    def test_top_k_should_be_clamped(self, top_k, expected) -> None:
        assert validate_query(_request(top_k=top_k)).top_k == expected

    @pytest.mark.parametrize(
        "overrides,field",
        [
            ({"query": "   "}, "query"),
            ({"query": "x" * 501}, "query"),
            ({"grade": 4}, "grade"),
            ({"grade": 11}, "grade"),
            ({"grade": None}, "grade"),
            ({"subject": "astrology"}, "subject"),
            ({"language": "french"}, "language"),
        ],
    )
    def test_invalid_fields_should_raise(self, overrides, field) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_query(_request(**overrides))

        assert exc_info.value.field == field

    def test_query_of_exactly_max_length_should_pass(self) -> None:
        assert len(validate_query(_request(query="y" * 500)).query) == 500


class TestProcessQuery:
    """Test suite for QueryOrchestrator.process_query."""

    @pytest.mark.asyncio
    async def test_new_conversation_should_hold_question_and_answer(
        self, orchestrator_for, db_session, student
    ) -> None:
        # Act
        response = await orchestrator_for().process_query(_request(), student)

        # Assert
        assert response.is_new_conversation is True
        assert response.language == "english"
        assert response.metadata.message_count == 2
        assert [c.number for c in response.citations] == [1, 2]

        conversation = await conversation_crud.get_for_owner(
            db_session, response.conversation_id, student.id
        )
        assert [m.role for m in conversation.messages] == ["user", "assistant"]
        assert [m.position for m in conversation.messages] == [0, 1]
        assert conversation.title == "What is photosynthesis?"
        assert conversation.messages[1].citations[0]["number"] == 1

    @pytest.mark.asyncio
    async def test_follow_up_should_append_two_messages(
        self, orchestrator_for, student
    ) -> None:
        orchestrator = orchestrator_for()
        first = await orchestrator.process_query(_request(), student)

        # Follow-up sends different grade/subject; the conversation keeps its own.
        second = await orchestrator.process_query(
            _request(query="And at night?", conversation_id=first.conversation_id, grade=8, subject="math"),
            student,
        )

        assert second.is_new_conversation is False
        assert second.conversation_id == first.conversation_id
        assert second.metadata.message_count == 4

        conversation = await orchestrator.conversations.get_for_owner(first.conversation_id, student.id)
        assert (conversation.grade, conversation.subject) == (7, "science")
        assert conversation.title == "What is photosynthesis?"

    @pytest.mark.asyncio
    async def test_profile_language_should_override_request(
        self, orchestrator_for, hindi_student, db_session
    ) -> None:
        # Arrange
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=ANSWER_PAYLOAD)

        # Act
        response = await orchestrator_for(handler).process_query(
            _request(language="english", subject="math"), hindi_student
        )

        # Assert
        assert seen["body"]["language"] == "hindi"
        assert seen["body"]["subject"] == "mathematics"
        assert response.language == "hindi"
        conversation = await conversation_crud.get_for_owner(
            db_session, response.conversation_id, hindi_student.id
        )
        assert conversation.language == "hindi"
        assert conversation.messages[1].message_metadata["language"] == "hindi"

    @pytest.mark.asyncio
    async def test_upstream_failure_should_keep_the_question(
        self, orchestrator_for, db_session, student
    ) -> None:
        # Act
        with pytest.raises(UpstreamUnavailableError) as exc_info:
            await orchestrator_for(offline_handler).process_query(_request(), student)

        # Assert
        error = exc_info.value
        assert error.kind == UpstreamFailure.OFFLINE
        assert error.conversation_id is not None

        conversation = await conversation_crud.get_for_owner(
            db_session, error.conversation_id, student.id
        )
        assert [m.role for m in conversation.messages] == ["user"]

    @pytest.mark.asyncio
    async def test_retry_after_failure_should_continue_same_conversation(
        self, orchestrator_for, student
    ) -> None:
        with pytest.raises(UpstreamUnavailableError) as exc_info:
            await orchestrator_for(offline_handler).process_query(_request(), student)

        retry = await orchestrator_for().process_query(
            _request(conversation_id=exc_info.value.conversation_id), student
        )

        assert retry.conversation_id == exc_info.value.conversation_id
        assert retry.metadata.message_count == 3

    @pytest.mark.asyncio
    async def test_invalid_request_should_write_nothing(
        self, orchestrator_for, db_session, student
    ) -> None:
        with pytest.raises(ValidationError):
            await orchestrator_for().process_query(_request(grade=12), student)

        count = await db_session.scalar(select(func.count()).select_from(ConversationModel))
        assert count == 0

    @pytest.mark.asyncio
    async def test_foreign_conversation_should_look_missing(
        self, orchestrator_for, student, other_student
    ) -> None:
        orchestrator = orchestrator_for()
        response = await orchestrator.process_query(_request(), student)

        with pytest.raises(NotFoundOrForbiddenError):
            await orchestrator.process_query(
                _request(conversation_id=response.conversation_id), other_student
            )

        with pytest.raises(NotFoundOrForbiddenError):
            await orchestrator.process_query(_request(conversation_id=uuid.uuid4()), student)


class TestStreamQuery:
    """Test suite for QueryOrchestrator.stream_query."""

    @pytest.mark.asyncio
    async def test_events_should_end_with_done(self, orchestrator_for, student) -> None:
        events = [e async for e in orchestrator_for().stream_query(_request(), student)]

        tokens = [e for e in events if e.type == StreamEventType.TOKEN]
        citations = [e for e in events if e.type == StreamEventType.CITATION]
        assert "".join(e.data["content"] for e in tokens) == ANSWER_PAYLOAD["answer"]
        assert [e.data["citation"]["number"] for e in citations] == [1, 2]
        assert events[-1].type == StreamEventType.DONE
        assert events[-1].data["isNewConversation"] is True
        assert events[-1].to_dict()["type"] == "done"

    @pytest.mark.asyncio
    async def test_failure_should_be_single_error_event(self, orchestrator_for, student) -> None:
        events = [e async for e in orchestrator_for(offline_handler).stream_query(_request(), student)]

        assert len(events) == 1
        assert events[0].type == StreamEventType.ERROR
        assert events[0].data["conversationId"]
