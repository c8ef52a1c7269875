"""
Feedback API client.

Wraps the feedback endpoints and keeps a FeedbackCache in step with the
server: successful submits and updates are cached, a duplicate submission
caches the server's existing record, and deletes evict the entry.

Dependencies: httpx, gyanmitra.client.feedback_cache
System role: Client SDK for message ratings
"""

import logging
from typing import Any
from uuid import UUID

import httpx

from gyanmitra.client.errors import raise_for_api_error
from gyanmitra.client.feedback_cache import CachedFeedback, FeedbackCache, InMemoryFeedbackCache
from gyanmitra.core.exceptions import ConflictError

logger = logging.getLogger(__name__)


class FeedbackClient:
    """HTTP client for the feedback endpoints."""

    def __init__(
        self,
        base_url: str = "http://localhost:5000/api",
        token: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        cache: FeedbackCache | None = None,
        timeout: float = 30.0,
    ) -> None:
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self.client = http_client or httpx.AsyncClient(
            base_url=base_url, timeout=timeout, headers=headers
        )
        self.cache = cache if cache is not None else InMemoryFeedbackCache()
        # Remembers where each feedback id lives so deletes can evict it.
        self._locations: dict[str, tuple[str, int]] = {}

    async def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        response = await self.client.request(method, url, **kwargs)
        raise_for_api_error(response)
        return response.json()

    def _remember(self, conversation_id: UUID | str, message_index: int, data: dict[str, Any]) -> CachedFeedback:
        entry = CachedFeedback.from_wire(data)
        self.cache.put(conversation_id, message_index, entry)
        if entry.feedback_id:
            self._locations[entry.feedback_id] = (str(conversation_id), message_index)
        return entry

    async def submit(
        self,
        conversation_id: UUID | str,
        message_index: int,
        rating: str,
        comment: str | None = None,
    ) -> CachedFeedback:
        """
        Rate an assistant message.

        Raises:
            ConflictError: If the message was already rated; the existing
                rating has been cached by the time this is raised
        """
        payload: dict[str, Any] = {
            "conversationId": str(conversation_id),
            "messageIndex": message_index,
            "rating": rating,
        }
        if comment is not None:
            payload["comment"] = comment

        try:
            body = await self._request("POST", "/feedback", json=payload)
        except ConflictError as e:
            if e.existing:
                self._remember(conversation_id, message_index, e.existing)
            logger.info(
                "Feedback already recorded",
                extra={"conversation_id": str(conversation_id), "message_index": message_index},
            )
            raise

        return self._remember(conversation_id, message_index, body["data"])

    async def update(
        self,
        feedback_id: UUID | str,
        rating: str | None = None,
        comment: str | None = None,
    ) -> CachedFeedback:
        """Change a rating or comment; an empty comment clears it."""
        payload: dict[str, Any] = {}
        if rating is not None:
            payload["rating"] = rating
        if comment is not None:
            payload["comment"] = comment

        body = await self._request("PUT", f"/feedback/{feedback_id}", json=payload)
        entry = CachedFeedback.from_wire(body["data"])
        location = self._locations.get(str(feedback_id))
        if location is not None:
            self.cache.put(location[0], location[1], entry)
        return entry

    async def delete(self, feedback_id: UUID | str) -> None:
        await self._request("DELETE", f"/feedback/{feedback_id}")
        location = self._locations.pop(str(feedback_id), None)
        if location is not None:
            self.cache.remove(*location)

    async def my_feedback(
        self,
        page: int = 1,
        limit: int = 20,
        rating: str | None = None,
    ) -> dict[str, Any]:
        """Fetch a page of the caller's feedback history and cache it."""
        params: dict[str, Any] = {"page": page, "limit": limit}
        if rating:
            params["rating"] = rating

        body = await self._request("GET", "/feedback/my-feedback", params=params)
        for item in body.get("data", []):
            self._remember(item["conversationId"], item["messageIndex"], item)
        return body

    async def aclose(self) -> None:
        await self.client.aclose()
