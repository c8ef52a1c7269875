"""
Test suite for FeedbackClient and the feedback cache.

System role: Verification of client-side feedback state
"""

import json
import uuid

import httpx
import pytest

from gyanmitra.client import CachedFeedback, FeedbackClient, InMemoryFeedbackCache
from gyanmitra.core.exceptions import ConflictError, NotFoundOrForbiddenError

CONVERSATION_ID = "0b3f1b2e-3c3c-4f7e-8f43-1f0f4c1d2a99"
FEEDBACK_ID = "9c7d2d1a-5f0e-4a55-b6a1-6b1f1c9e7e01"
CREATED = {
    "success": True,
    "message": "Feedback submitted successfully",
    "data": {
        "id": FEEDBACK_ID,
        "rating": "positive",
        "comment": None,
        "timestamp": "2024-05-01T10:00:00Z",
    },
}


class FakeFeedbackApi:
    """Minimal in-process stand-in for the feedback endpoints."""

    def __init__(self) -> None:
        self.submitted: dict | None = None
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "POST":
            if self.submitted is not None:
                return httpx.Response(
                    409,
                    json={
                        "success": False,
                        "error": "You have already provided feedback for this message",
                        "existingFeedback": {
                            "rating": self.submitted["rating"],
                            "comment": None,
                            "timestamp": "2024-05-01T10:00:00Z",
                        },
                    },
                )
            self.submitted = json.loads(request.content)
            return httpx.Response(201, json={**CREATED, "data": {**CREATED["data"], "rating": self.submitted["rating"]}})
        if request.method == "DELETE":
            if request.url.path.endswith(FEEDBACK_ID):
                return httpx.Response(200, json={"success": True, "message": "Feedback deleted successfully"})
            return httpx.Response(404, json={"success": False, "error": "Feedback not found or you do not have access"})
        if request.method == "PUT":
            return httpx.Response(
                200,
                json={**CREATED, "data": {**CREATED["data"], "rating": "negative", "comment": "meh"}},
            )
        return httpx.Response(
            200,
            json={
                "success": True,
                "data": [
                    {
                        "id": FEEDBACK_ID,
                        "conversationId": CONVERSATION_ID,
                        "messageIndex": 3,
                        "rating": "negative",
                        "comment": None,
                        "timestamp": "2024-05-01T10:00:00Z",
                    }
                ],
                "pagination": {"page": 1, "limit": 20, "total": 1, "totalPages": 1, "hasMore": False},
            },
        )


@pytest.fixture
def api() -> FakeFeedbackApi:
    return FakeFeedbackApi()


@pytest.fixture
def feedback_client(api) -> FeedbackClient:
    http_client = httpx.AsyncClient(base_url="http://api.test/api", transport=httpx.MockTransport(api))
    return FeedbackClient(http_client=http_client)


class TestFeedbackClient:
    """Test suite for FeedbackClient."""

    @pytest.mark.asyncio
    async def test_submit_should_send_camel_case_and_cache(self, feedback_client, api) -> None:
        entry = await feedback_client.submit(CONVERSATION_ID, 1, "positive")

        assert json.loads(api.requests[0].content) == {
            "conversationId": CONVERSATION_ID,
            "messageIndex": 1,
            "rating": "positive",
        }
        assert entry.feedback_id == FEEDBACK_ID
        assert feedback_client.cache.has_feedback(CONVERSATION_ID, 1)

    @pytest.mark.asyncio
    async def test_duplicate_should_cache_existing_and_raise(self, feedback_client) -> None:
        await feedback_client.submit(CONVERSATION_ID, 1, "negative")
        feedback_client.cache.remove(CONVERSATION_ID, 1)

        with pytest.raises(ConflictError) as exc_info:
            await feedback_client.submit(CONVERSATION_ID, 1, "positive")

        assert exc_info.value.existing["rating"] == "negative"
        assert feedback_client.cache.get(CONVERSATION_ID, 1).rating == "negative"

    @pytest.mark.asyncio
    async def test_update_and_delete_should_keep_cache_in_step(self, feedback_client) -> None:
        await feedback_client.submit(CONVERSATION_ID, 1, "positive")

        await feedback_client.update(FEEDBACK_ID, rating="negative", comment="meh")
        assert feedback_client.cache.get(CONVERSATION_ID, 1).comment == "meh"

        await feedback_client.delete(FEEDBACK_ID)
        assert not feedback_client.cache.has_feedback(CONVERSATION_ID, 1)

    @pytest.mark.asyncio
    async def test_delete_of_unknown_feedback_should_raise(self, feedback_client) -> None:
        with pytest.raises(NotFoundOrForbiddenError):
            await feedback_client.delete("00000000-0000-0000-0000-000000000000")

    @pytest.mark.asyncio
    async def test_my_feedback_should_populate_cache(self, feedback_client) -> None:
        body = await feedback_client.my_feedback()

        assert body["pagination"]["total"] == 1
        assert feedback_client.cache.get(CONVERSATION_ID, 3).rating == "negative"


class TestInMemoryFeedbackCache:
    """Test suite for InMemoryFeedbackCache."""

    def test_statistics_should_count_ratings(self) -> None:
        cache = InMemoryFeedbackCache()
        cache.put("c1", 1, CachedFeedback(rating="positive"))
        cache.put("c1", 3, CachedFeedback(rating="positive"))
        cache.put("c2", 1, CachedFeedback(rating="negative"))

        stats = cache.statistics()

        assert (stats.total, stats.positive, stats.negative) == (3, 2, 1)
        assert stats.positive_percentage == 67

    def test_empty_cache_should_report_zero_percent(self) -> None:
        assert InMemoryFeedbackCache().statistics().positive_percentage == 0

    def test_clear_conversation_should_only_drop_that_conversation(self) -> None:
        cache = InMemoryFeedbackCache()
        cache.put("c1", 1, CachedFeedback(rating="positive"))
        cache.put("c1", 3, CachedFeedback(rating="negative"))
        cache.put("c2", 1, CachedFeedback(rating="negative"))

        removed = cache.clear_conversation("c1")

        assert removed == 2
        assert cache.get("c1", 1) is None
        assert cache.get("c2", 1).rating == "negative"

    def test_keys_should_not_depend_on_id_type(self) -> None:
        conversation_id = uuid.UUID(CONVERSATION_ID)
        cache = InMemoryFeedbackCache()
        cache.put(conversation_id, 1, CachedFeedback(rating="positive"))

        assert cache.has_feedback(CONVERSATION_ID, 1)
