"""
HTTP client for the answer-generation service.

Builds the outbound query, executes it with a long timeout, classifies
failures into offline/timeout/upstream_error/invalid_response, and
translates the wire response into Citation/SourceChunk/answer shapes.

Dependencies: httpx, gyanmitra.configs, gyanmitra.core
System role: Inference service adapter
"""

import logging
from datetime import datetime, timezone
from typing import Any

import httpx

from gyanmitra.boundary.inference.mock_responder import MOCK_MODEL_INFO, MockResponder
from gyanmitra.configs.inference import InferenceSettings
from gyanmitra.core.citation_builder import CitationBuilder, citation_builder
from gyanmitra.core.exceptions import UpstreamFailure, UpstreamUnavailableError
from gyanmitra.models.query import InferenceAnswer, InferenceRequest
from gyanmitra.observability.log_utils import safe_log_value

logger = logging.getLogger(__name__)

OFFLINE_MESSAGE = "The answer service is not reachable. Please try again later."
TIMEOUT_MESSAGE = "The answer service took too long to respond. Please try again."
INVALID_MESSAGE = "The answer service returned an unreadable response."


class InferenceClient:
    """
    Client for the answer-generation service.

    In mock mode no network calls are made; answers come from a
    MockResponder and are passed through the same transform.
    """

    def __init__(
        self,
        settings: InferenceSettings,
        http_client: httpx.AsyncClient | None = None,
        responder: MockResponder | None = None,
        builder: CitationBuilder = citation_builder,
    ) -> None:
        """
        Initialize the client.

        Args:
            settings: Inference service settings
            http_client: Pre-built client (tests inject one with a MockTransport)
            responder: Mock responder used when settings.use_mock is set
            builder: Citation formatter
        """
        self.settings = settings
        self.base_url = settings.url.rstrip("/")
        self.mock_mode = settings.use_mock
        self.responder = responder or MockResponder(settings.mock_latency_seconds)
        self.builder = builder
        self.client = http_client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=settings.timeout_seconds,
            headers={"Content-Type": "application/json"},
        )
        logger.info(
            "InferenceClient initialized",
            extra={"base_url": self.base_url, "mock_mode": self.mock_mode},
        )

    async def query(self, request: InferenceRequest) -> InferenceAnswer:
        """
        Ask the service for an answer.

        Args:
            request: Query with grade, mapped subject, language and top_k

        Returns:
            InferenceAnswer: Translated answer

        Raises:
            UpstreamUnavailableError: On any classified failure
        """
        if self.mock_mode:
            logger.info("Answering from mock responder", extra={"subject": request.subject})
            return self.transform(await self.responder.respond(request))

        logger.info(
            "Calling answer service",
            extra={
                "query": safe_log_value(request.query, 50),
                "grade": request.grade,
                "subject": request.subject,
                "language": request.language,
                "top_k": request.top_k,
            },
        )

        try:
            response = await self.client.post("/query", json=request.to_payload())
            response.raise_for_status()
            payload = response.json()
        except httpx.TimeoutException as e:
            raise self._failure(UpstreamFailure.TIMEOUT, TIMEOUT_MESSAGE, e) from e
        except httpx.ConnectError as e:
            raise self._failure(UpstreamFailure.OFFLINE, OFFLINE_MESSAGE, e) from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            message = f"Answer service error ({status}): {self._error_detail(e.response)}"
            raise self._failure(UpstreamFailure.UPSTREAM_ERROR, message, e, status) from e
        except httpx.RequestError as e:
            raise self._failure(
                UpstreamFailure.UPSTREAM_ERROR, f"Answer service error: {e}", e
            ) from e
        except ValueError as e:
            raise self._failure(UpstreamFailure.INVALID_RESPONSE, INVALID_MESSAGE, e) from e

        if not isinstance(payload, dict) or not payload.get("answer") or not payload.get("metadata"):
            raise self._failure(
                UpstreamFailure.INVALID_RESPONSE,
                INVALID_MESSAGE,
                ValueError("missing answer or metadata"),
            )

        answer = self.transform(payload)
        logger.info(
            "Answer received",
            extra={
                "citations": len(answer.citations),
                "source_chunks": len(answer.source_chunks),
                "confidence": answer.confidence,
                "processing_time_ms": answer.processing_time_ms,
            },
        )
        return answer

    def transform(self, payload: dict[str, Any]) -> InferenceAnswer:
        """
        Translate a wire response into an InferenceAnswer.

        Raises:
            UpstreamUnavailableError: When metadata is not an object
        """
        metadata = payload.get("metadata") or {}
        if not isinstance(metadata, dict):
            raise self._failure(
                UpstreamFailure.INVALID_RESPONSE,
                INVALID_MESSAGE,
                ValueError("metadata is not an object"),
            )

        in_scope = payload.get("in_scope")
        try:
            return self._build_answer(payload, metadata, in_scope)
        except (TypeError, ValueError) as e:
            raise self._failure(UpstreamFailure.INVALID_RESPONSE, INVALID_MESSAGE, e) from e

    def _build_answer(self, payload: dict, metadata: dict, in_scope: Any) -> InferenceAnswer:
        return InferenceAnswer(
            answer=str(payload.get("answer", "")),
            citations=self.builder.build_citations(payload.get("citations")),
            source_chunks=self.builder.build_source_chunks(payload.get("source_chunks")),
            in_scope=True if in_scope is None else bool(in_scope),
            model_id=str(metadata.get("model") or self.settings.default_model_id),
            confidence=float(metadata.get("confidence") or 0.0),
            tokens_used=int(metadata.get("tokens_used") or 0),
            chunks_retrieved=int(metadata.get("chunks_retrieved") or 0),
            processing_time_ms=int(metadata.get("processing_time_ms") or 0),
            grade=int(metadata.get("grade") or 0),
            subject=str(metadata.get("subject") or ""),
            language=str(metadata.get("language") or ""),
        )

    async def check_health(self) -> dict[str, Any]:
        """
        Probe the service's health endpoint. Never raises.

        Returns:
            dict: status ("ok"/"error"), mode ("mock"/"live"), timestamp, and
            either the service's own health fields or an error message
        """
        timestamp = datetime.now(timezone.utc).isoformat()
        if self.mock_mode:
            return {"status": "ok", "mode": "mock", "timestamp": timestamp}

        try:
            response = await self.client.get(
                "/health", timeout=self.settings.health_timeout_seconds
            )
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Answer service health check failed", extra={"error": str(e)})
            return {"status": "error", "mode": "live", "message": str(e), "timestamp": timestamp}

        health = {"status": "ok", "mode": "live"}
        if isinstance(body, dict):
            health.update(body)
        health["timestamp"] = timestamp
        return health

    async def get_model_info(self) -> dict[str, Any]:
        """
        Fetch model information from the service.

        Raises:
            UpstreamUnavailableError: If the information cannot be retrieved
        """
        if self.mock_mode:
            return dict(MOCK_MODEL_INFO)

        try:
            response = await self.client.get(
                "/model-info", timeout=self.settings.health_timeout_seconds
            )
            response.raise_for_status()
            return response.json()
        except httpx.TimeoutException as e:
            raise self._failure(UpstreamFailure.TIMEOUT, "Failed to retrieve model information", e) from e
        except httpx.ConnectError as e:
            raise self._failure(UpstreamFailure.OFFLINE, "Failed to retrieve model information", e) from e
        except (httpx.HTTPError, ValueError) as e:
            raise self._failure(
                UpstreamFailure.UPSTREAM_ERROR, "Failed to retrieve model information", e
            ) from e

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return safe_log_value(response.text, 200) or "Unknown answer service error"
        if isinstance(body, dict):
            detail = body.get("detail") or body.get("error")
            if detail:
                return str(detail)
        return "Unknown answer service error"

    def _failure(
        self,
        kind: UpstreamFailure,
        message: str,
        cause: Exception,
        status: int | None = None,
    ) -> UpstreamUnavailableError:
        logger.error(
            "Answer service call failed",
            extra={
                "kind": kind.value,
                "upstream_status": status,
                "error": safe_log_value(str(cause), 200),
            },
        )
        return UpstreamUnavailableError(message, kind=kind, upstream_status=status)
