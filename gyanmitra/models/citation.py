"""
Citation domain models.

A Citation is a curated, numbered excerpt shown inline with an answer; a
SourceChunk is the full retrieved passage behind it, shown on demand.

Dependencies: pydantic
System role: Citation data structures
"""

from pydantic import Field

from gyanmitra.models.common import CamelModel


class Citation(CamelModel):
    """Numbered reference to a source excerpt."""

    number: int = Field(ge=1, description="1-based display number, contiguous per answer")
    source: str = Field(default="", description="Source book or document name")
    chapter: str = Field(default="", description="Chapter heading")
    section: str = Field(default="", description="Section heading")
    page: int = Field(default=0, description="Page number in source")
    excerpt: str = Field(default="", description="Short excerpt from the source")
    relevance: float = Field(default=0.0, ge=0.0, le=1.0, description="Retrieval relevance")
    relevance_percent: int = Field(default=0, description="round(relevance * 100)")
    chunk_id: str = Field(default="", description="Chunk identifier for tracing")


class SourceChunk(CamelModel):
    """Full retrieved passage backing one or more citations."""

    chunk_id: str = Field(default="", description="Chunk identifier")
    full_text: str = Field(default="", description="Full passage text")
    page: int = Field(default=0)
    chapter: str = Field(default="Unknown")
    section: str = Field(default="General")
    token_count: int = Field(default=0)
    relevance: float = Field(default=0.0, ge=0.0, le=1.0)
    relevance_percent: int = Field(default=0)
