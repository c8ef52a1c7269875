"""
Conversation domain models and schemas.

Messages are a tagged union on ``role``: only the assistant variant carries
citations, source chunks and generation metadata, and the user variant
rejects those fields outright.

Dependencies: pydantic
System role: Conversation API contracts
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Union
from uuid import UUID

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from gyanmitra.models.citation import Citation, SourceChunk
from gyanmitra.models.common import CamelModel, Pagination


class ConversationStatus(str, Enum):
    """Conversation lifecycle states."""

    ACTIVE = "active"
    ARCHIVED = "archived"


class MessageRole(str, Enum):
    """Message authors."""

    USER = "user"
    ASSISTANT = "assistant"


class ConversationMetadata(CamelModel):
    """Grade/subject/language context fixed at conversation creation."""

    grade: int
    subject: str
    language: str


class AssistantMessageMetadata(CamelModel):
    """Generation metadata recorded on assistant messages."""

    language: str
    in_scope: bool = True
    latency_ms: int = 0
    model_id: str = ""
    confidence: float = 0.0
    tokens_used: int = 0
    chunks_retrieved: int = 0
    processing_time_ms: int = 0


class UserMessage(CamelModel):
    """A question asked by the student."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    role: Literal["user"] = "user"
    content: str
    timestamp: datetime


class AssistantMessage(CamelModel):
    """An answer produced by the answer service."""

    role: Literal["assistant"] = "assistant"
    content: str
    citations: list[Citation] = Field(default_factory=list)
    source_chunks: list[SourceChunk] = Field(default_factory=list)
    timestamp: datetime
    metadata: AssistantMessageMetadata


Message = Annotated[Union[UserMessage, AssistantMessage], Field(discriminator="role")]


class ConversationDetail(CamelModel):
    """Full conversation including every message in turn order."""

    id: UUID
    title: str
    metadata: ConversationMetadata
    messages: list[Message]
    status: ConversationStatus
    message_count: int
    created_at: datetime
    updated_at: datetime


class LastMessagePreview(CamelModel):
    """Excerpt of the most recent message."""

    content: str
    timestamp: datetime


class ConversationPreview(CamelModel):
    """History list entry."""

    id: UUID
    title: str
    metadata: ConversationMetadata
    status: ConversationStatus
    message_count: int
    last_message: LastMessagePreview | None = None
    created_at: datetime
    updated_at: datetime


class ConversationListResponse(CamelModel):
    """Paginated history response."""

    success: bool = True
    data: list[ConversationPreview]
    pagination: Pagination


class ConversationDetailResponse(CamelModel):
    """Single conversation response."""

    success: bool = True
    data: ConversationDetail


class ConversationStatusData(CamelModel):
    """Identifier and new status after archive/restore."""

    id: UUID
    status: ConversationStatus


class ConversationStatusResponse(CamelModel):
    """Archive/restore response."""

    success: bool = True
    message: str
    data: ConversationStatusData
