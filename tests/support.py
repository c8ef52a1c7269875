"""
Shared fakes for the answer service.

Canned wire payloads and httpx.MockTransport handlers used by conftest
fixtures and by tests that build their own clients.
"""

from typing import Any

import httpx

TEST_SECRET = "test-secret-key"

ANSWER_PAYLOAD: dict[str, Any] = {
    "answer": "Photosynthesis turns light into chemical energy.",
    "in_scope": True,
    "citations": [
        {
            "id": 7,
            "source": "NCERT Science 7",
            "chapter": "Nutrition in Plants",
            "section": "1.2",
            "page": 12,
            "excerpt": "Plants make food using sunlight...",
            "relevance": 0.912,
            "chunk_id": "c-1",
        },
        {
            "id": 3,
            "source": "NCERT Science 7",
            "chapter": "Nutrition in Plants",
            "page": 14,
            "excerpt": "Chlorophyll absorbs light...",
            "relevance": 0.5,
            "chunk_id": "c-2",
        },
    ],
    "source_chunks": [
        {
            "chunk_id": "c-1",
            "full_text": "Plants make food using sunlight, water and carbon dioxide.",
            "relevance": 0.912,
            "metadata": {"page": 12, "chapter": "Nutrition in Plants", "token_count": 40},
        }
    ],
    "metadata": {
        "grade": 7,
        "subject": "science",
        "language": "english",
        "model": "test-model",
        "tokens_used": 321,
        "confidence": 0.8,
        "chunks_retrieved": 2,
        "processing_time_ms": 900,
    },
}


def answer_handler(payload: dict[str, Any] | None = None, status_code: int = 200):
    """Build a MockTransport handler that answers /query with ``payload``."""
    body = ANSWER_PAYLOAD if payload is None else payload

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/health":
            return httpx.Response(200, json={"status": "healthy", "model_loaded": True})
        if request.url.path == "/model-info":
            return httpx.Response(200, json={"model": "test-model", "quantization": "4bit"})
        return httpx.Response(status_code, json=body)

    return handler


def offline_handler(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)
