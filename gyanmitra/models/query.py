"""
Query domain models and schemas.

Request/response schemas for the query endpoint plus the internal shapes
exchanged with the answer-generation service.

Dependencies: pydantic
System role: Query API contracts
"""

from uuid import UUID

from pydantic import Field

from gyanmitra.models.citation import Citation, SourceChunk
from gyanmitra.models.common import CamelModel


class QueryRequest(CamelModel):
    """
    Request schema for submitting a question.

    Range checks live in the orchestrator so that every rejection surfaces
    as the same 400 error shape.
    """

    query: str | None = Field(default=None, description="Student question (1-500 chars)")
    grade: int | None = Field(default=None, description="Grade 5-10")
    subject: str | None = Field(default=None, description="Client subject value")
    language: str | None = Field(default=None, description="Requested answer language")
    conversation_id: UUID | None = Field(
        default=None,
        description="Existing conversation for follow-up questions",
    )
    top_k: int | None = Field(
        default=None,
        alias="top_k",
        description="Retrieval depth, clamped into 1-10 (default 5)",
    )


class InferenceRequest(CamelModel):
    """Outbound request to the answer service."""

    query: str
    grade: int
    subject: str
    language: str
    top_k: int = 5

    def to_payload(self) -> dict:
        """Wire payload in the service's snake_case vocabulary."""
        return {
            "query": self.query,
            "grade": self.grade,
            "subject": self.subject,
            "language": self.language,
            "top_k": self.top_k,
        }


class InferenceAnswer(CamelModel):
    """Answer translated from the service's wire format."""

    answer: str
    citations: list[Citation] = Field(default_factory=list)
    source_chunks: list[SourceChunk] = Field(default_factory=list)
    in_scope: bool = True
    model_id: str = ""
    confidence: float = 0.0
    tokens_used: int = 0
    chunks_retrieved: int = 0
    processing_time_ms: int = 0
    grade: int = 0
    subject: str = ""
    language: str = ""


class QueryMetadata(CamelModel):
    """Per-answer metadata returned to the client."""

    latency_ms: int
    message_count: int
    model_id: str
    confidence: float = 0.0
    tokens_used: int = 0
    chunks_retrieved: int = 0
    processing_time_ms: int = 0
    grade: int
    subject: str


class QueryResponse(CamelModel):
    """Response schema for a completed query."""

    success: bool = True
    conversation_id: UUID
    is_new_conversation: bool
    answer: str
    citations: list[Citation]
    source_chunks: list[SourceChunk]
    language: str
    in_scope: bool
    metadata: QueryMetadata
