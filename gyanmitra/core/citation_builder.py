"""
Citation extraction and formatting.

Translates the answer service's citation and source-chunk records into the
numbered shapes shown to students. Display numbers are always assigned here
by position so they stay contiguous whatever the service sends.

Dependencies: gyanmitra.models
System role: Citation formatting business logic
"""

from typing import Any

from gyanmitra.models.citation import Citation, SourceChunk


def clamp_relevance(value: Any) -> float:
    """Coerce a relevance score into [0, 1]; unusable values become 0."""
    try:
        score = float(value)
    except (TypeError, ValueError):
        return 0.0
    if score != score:  # NaN
        return 0.0
    return min(max(score, 0.0), 1.0)


def relevance_percent(relevance: float) -> int:
    return int(round(relevance * 100))


def _text(value: Any, default: str = "") -> str:
    return str(value) if value not in (None, "") else default


def _int(value: Any, default: int = 0) -> int:
    try:
        return int(value) if value not in (None, "") else default
    except (TypeError, ValueError):
        return default


class CitationBuilder:
    """Citation building business logic."""

    def build_citations(self, records: list[dict] | None) -> list[Citation]:
        """
        Build numbered citations from wire records.

        Any upstream ``id`` is ignored; numbers run 1..N in received order.

        Args:
            records: Citation dicts from the answer service

        Returns:
            list[Citation]: Citations numbered 1..N
        """
        usable = [record for record in records or [] if isinstance(record, dict)]
        return [
            self.format_citation(number, record)
            for number, record in enumerate(usable, start=1)
        ]

    def build_source_chunks(self, records: list[dict] | None) -> list[SourceChunk]:
        """
        Build source chunks from wire records.

        Chunk metadata (page, chapter, section, token_count) lives in a
        nested ``metadata`` object on the wire.
        """
        return [
            self.format_source_chunk(record)
            for record in records or []
            if isinstance(record, dict)
        ]

    def format_citation(self, number: int, record: dict) -> Citation:
        """Format one citation record with the given display number."""
        relevance = clamp_relevance(record.get("relevance"))
        return Citation(
            number=number,
            source=_text(record.get("source")),
            chapter=_text(record.get("chapter")),
            section=_text(record.get("section")),
            page=_int(record.get("page")),
            excerpt=_text(record.get("excerpt")),
            relevance=relevance,
            relevance_percent=relevance_percent(relevance),
            chunk_id=_text(record.get("chunk_id")),
        )

    def format_source_chunk(self, record: dict) -> SourceChunk:
        """Format one source-chunk record, applying display defaults."""
        metadata = record.get("metadata")
        if not isinstance(metadata, dict):
            metadata = {}
        relevance = clamp_relevance(record.get("relevance"))
        return SourceChunk(
            chunk_id=_text(record.get("chunk_id")),
            full_text=_text(record.get("full_text")),
            page=_int(metadata.get("page")),
            chapter=_text(metadata.get("chapter"), "Unknown"),
            section=_text(metadata.get("section"), "General"),
            token_count=_int(metadata.get("token_count")),
            relevance=relevance,
            relevance_percent=relevance_percent(relevance),
        )


citation_builder = CitationBuilder()
