"""
Client-side response streaming.

Consumes the query event stream (``data: {...}`` records) or, when no live
stream is available, emulates incremental delivery of a complete answer.
Both modes are async iterators of StreamUpdate and honour one shared
CancellationToken. ResponseStreamer.run adapts either mode to callbacks.

Cancelling is not an error: it stops consumption and calls neither
on_error nor on_complete. It never cancels work on the server.

Dependencies: asyncio, httpx, gyanmitra.models
System role: Incremental answer delivery for clients
"""

import asyncio
import json
import logging
from collections.abc import AsyncGenerator, Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import httpx

from gyanmitra.client.errors import StreamFailedError, raise_for_api_error
from gyanmitra.core.exceptions import GyanMitraException
from gyanmitra.core.text_chunks import word_chunks
from gyanmitra.models.citation import Citation
from gyanmitra.models.query import QueryRequest
from gyanmitra.models.streaming import StreamEventType

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "
DEFAULT_CHUNK_INTERVAL = 0.03


class CancellationToken:
    """Cooperative cancellation shared by a stream and its consumer."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        await self._event.wait()


class StreamUpdateType(str, Enum):
    """Kinds of update delivered to consumers."""

    CHUNK = "chunk"
    CITATION = "citation"
    COMPLETE = "complete"


@dataclass
class StreamResult:
    """Final state of a completed stream."""

    answer: str
    citations: list[Citation] = field(default_factory=list)
    conversation_id: str | None = None
    is_new_conversation: bool | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class StreamUpdate:
    """One increment of a stream."""

    kind: StreamUpdateType
    delta: str = ""
    accumulated: str = ""
    citation: Citation | None = None
    result: StreamResult | None = None


async def _until_cancelled(awaitable: Awaitable[Any], cancel: CancellationToken) -> Any:
    """Await ``awaitable`` unless the token fires first; None when cancelled."""
    task = asyncio.ensure_future(awaitable)
    waiter = asyncio.ensure_future(cancel.wait())
    try:
        await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        waiter.cancel()
        if not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

    if task.cancelled():
        return None
    return task.result()


class ResponseStreamer:
    """
    Streams answers from the query stream endpoint.

    Attributes:
        client: httpx client rooted at the API base URL (".../api")
        chunk_interval: Delay between emulated chunks, in seconds
    """

    def __init__(
        self,
        base_url: str = "http://localhost:5000/api",
        token: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        chunk_interval: float = DEFAULT_CHUNK_INTERVAL,
        timeout: float = 600.0,
    ) -> None:
        """
        Initialize the streamer.

        Args:
            base_url: API base URL
            token: Bearer token sent with stream requests
            http_client: Pre-built client (tests inject one with a MockTransport)
            chunk_interval: Emulation delay between chunks
            timeout: Request timeout in seconds
        """
        self.token = token
        self.chunk_interval = chunk_interval
        self.client = http_client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "text/event-stream"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def stream(
        self,
        request: QueryRequest,
        cancel: CancellationToken | None = None,
    ) -> AsyncGenerator[StreamUpdate, None]:
        """
        Stream a live answer.

        Args:
            request: Query payload
            cancel: Token checked between records

        Yields:
            StreamUpdate: chunk and citation updates, then one complete update

        Raises:
            GyanMitraException: Mapped from an HTTP error response
            StreamFailedError: If the server sends an error record
            httpx.TransportError: If the stream cannot be opened
        """
        cancel = cancel or CancellationToken()
        payload = request.model_dump(by_alias=True, mode="json", exclude_none=True)

        async with self.client.stream(
            "POST", "/query/stream", json=payload, headers=self._headers()
        ) as response:
            if not response.is_success:
                await response.aread()
                raise_for_api_error(response)

            accumulated = ""
            citations: list[Citation] = []

            async for line in response.aiter_lines():
                if cancel.cancelled:
                    return
                if not line.startswith(DATA_PREFIX):
                    continue

                try:
                    record = json.loads(line[len(DATA_PREFIX):])
                    kind = record["type"]
                except (ValueError, KeyError, TypeError) as e:
                    logger.warning("Skipping unparsable stream record", extra={"error": str(e)})
                    continue

                if kind == StreamEventType.TOKEN.value:
                    delta = str(record.get("content", ""))
                    accumulated += delta
                    yield StreamUpdate(StreamUpdateType.CHUNK, delta=delta, accumulated=accumulated)

                elif kind == StreamEventType.CITATION.value:
                    try:
                        citation = Citation.model_validate(record.get("citation") or {})
                    except ValueError as e:
                        logger.warning("Skipping malformed citation", extra={"error": str(e)})
                        continue
                    citations.append(citation)
                    yield StreamUpdate(StreamUpdateType.CITATION, citation=citation)

                elif kind == StreamEventType.DONE.value:
                    yield StreamUpdate(
                        StreamUpdateType.COMPLETE,
                        accumulated=accumulated,
                        result=StreamResult(
                            answer=accumulated,
                            citations=citations,
                            conversation_id=record.get("conversationId"),
                            is_new_conversation=record.get("isNewConversation"),
                            metadata=record.get("metadata") or {},
                        ),
                    )
                    return

                elif kind == StreamEventType.ERROR.value:
                    raise StreamFailedError(
                        str(record.get("error") or "Stream failed"),
                        conversation_id=record.get("conversationId"),
                    )

            # Connection closed without a done record.
            if not cancel.cancelled:
                yield StreamUpdate(
                    StreamUpdateType.COMPLETE,
                    accumulated=accumulated,
                    result=StreamResult(
                        answer=accumulated,
                        citations=citations,
                        conversation_id=str(request.conversation_id) if request.conversation_id else None,
                    ),
                )

    async def emulate(
        self,
        answer: str,
        citations: list[Citation] | None = None,
        conversation_id: str | None = None,
        cancel: CancellationToken | None = None,
        interval: float | None = None,
    ) -> AsyncGenerator[StreamUpdate, None]:
        """
        Deliver a complete answer chunk by chunk.

        Args:
            answer: Full answer text
            citations: Citations to deliver after the text
            conversation_id: Conversation the answer belongs to
            cancel: Token checked before and after every delay
            interval: Delay between chunks, defaults to chunk_interval

        Yields:
            StreamUpdate: chunk and citation updates, then one complete update
        """
        cancel = cancel or CancellationToken()
        interval = self.chunk_interval if interval is None else interval
        citations = citations or []
        accumulated = ""

        for chunk in word_chunks(answer):
            if cancel.cancelled:
                return
            await asyncio.sleep(interval)
            if cancel.cancelled:
                return
            accumulated += chunk
            yield StreamUpdate(StreamUpdateType.CHUNK, delta=chunk, accumulated=accumulated)

        for citation in citations:
            if cancel.cancelled:
                return
            yield StreamUpdate(StreamUpdateType.CITATION, citation=citation)

        if cancel.cancelled:
            return
        yield StreamUpdate(
            StreamUpdateType.COMPLETE,
            accumulated=accumulated,
            result=StreamResult(
                answer=accumulated,
                citations=list(citations),
                conversation_id=conversation_id,
            ),
        )

    async def run(
        self,
        request: QueryRequest,
        on_chunk: Callable[[str, str], None],
        on_complete: Callable[[StreamResult], None] | None = None,
        on_error: Callable[[Exception], None] | None = None,
        cancel: CancellationToken | None = None,
        fallback_answer: str | None = None,
    ) -> StreamResult | None:
        """
        Callback adapter over stream()/emulate().

        If the live stream cannot be opened and ``fallback_answer`` is given,
        that answer is emulated instead.

        Args:
            request: Query payload
            on_chunk: Called with (delta, accumulated) per chunk
            on_complete: Called once with the final result
            on_error: Called once on failure; if omitted the error propagates
            cancel: Token; once set, no further callbacks fire
            fallback_answer: Answer to emulate when the stream cannot be opened

        Returns:
            StreamResult | None: The result, or None if cancelled or failed
        """
        cancel = cancel or CancellationToken()

        async def consume(updates: AsyncGenerator[StreamUpdate, None]) -> StreamResult | None:
            # Closing the generator releases the open HTTP response on every exit path.
            try:
                async for update in updates:
                    if cancel.cancelled:
                        return None
                    if update.kind == StreamUpdateType.CHUNK:
                        on_chunk(update.delta, update.accumulated)
                    elif update.kind == StreamUpdateType.COMPLETE:
                        return update.result
                return None
            finally:
                await updates.aclose()

        try:
            try:
                result = await _until_cancelled(consume(self.stream(request, cancel)), cancel)
            except httpx.TransportError as e:
                if fallback_answer is None:
                    raise
                logger.warning("Live stream unavailable, emulating", extra={"error": str(e)})
                result = await _until_cancelled(
                    consume(self.emulate(fallback_answer, cancel=cancel)), cancel
                )
        except (GyanMitraException, httpx.HTTPError) as e:
            if cancel.cancelled:
                return None
            if on_error is None:
                raise
            on_error(e)
            return None

        if result is None or cancel.cancelled:
            return None
        if on_complete is not None:
            on_complete(result)
        return result

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()
