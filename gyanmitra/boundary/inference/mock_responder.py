"""
Deterministic stand-in for the answer service.

Produces a wire-format response so that mock answers pass through the same
transform as real ones. Enabled with AI_SERVICE_USE_MOCK (or USE_MOCK_AI).

Dependencies: asyncio
System role: Development/test double for the inference service
"""

import asyncio
from typing import Any

from gyanmitra.models.query import InferenceRequest

MOCK_MODEL_INFO = {"model": "mock-model-v1", "quantization": "N/A"}


class MockResponder:
    """Returns canned wire responses after a fixed delay."""

    def __init__(self, latency_seconds: float = 1.5) -> None:
        self.latency_seconds = latency_seconds

    async def respond(self, request: InferenceRequest) -> dict[str, Any]:
        """
        Build the mock wire response for a request.

        Args:
            request: Outbound inference request

        Returns:
            dict: Response in the answer service's wire format
        """
        if self.latency_seconds > 0:
            await asyncio.sleep(self.latency_seconds)

        return {
            "answer": f'[MOCK] Answer for: "{request.query}" in {request.language}',
            "metadata": {
                "grade": request.grade,
                "subject": request.subject,
                "language": request.language,
                "model": "mock",
                "tokens_used": 512,
                "confidence": 0.87,
                "chunks_retrieved": 2,
                "processing_time_ms": 1500,
            },
            "citations": [],
            "source_chunks": [],
        }
