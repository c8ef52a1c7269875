"""
Test suite for CitationBuilder.

Tests numbering, relevance clamping and source-chunk defaults.

System role: Verification of citation formatting
"""

import math

import pytest

from gyanmitra.core.citation_builder import CitationBuilder, clamp_relevance, relevance_percent


@pytest.fixture
def builder() -> CitationBuilder:
    return CitationBuilder()


class TestBuildCitations:
    """Test suite for CitationBuilder.build_citations."""

    def test_should_number_contiguously_ignoring_upstream_ids(self, builder: CitationBuilder) -> None:
        # Arrange
        records = [{"id": 9, "source": "A"}, {"id": 2, "source": "B"}, {"source": "C"}]

        # Act
        citations = builder.build_citations(records)

        # Assert
        assert [c.number for c in citations] == [1, 2, 3]
        assert [c.source for c in citations] == ["A", "B", "C"]

    def test_should_number_contiguously_when_records_are_malformed(
        self, builder: CitationBuilder
    ) -> None:
        # Arrange
        records = [{"source": "A"}, None, "junk", {"source": "B"}]

        # Act
        citations = builder.build_citations(records)

        # Assert
        assert [c.number for c in citations] == [1, 2]
        assert [c.source for c in citations] == ["A", "B"]

    def test_should_return_empty_list_for_missing_records(self, builder: CitationBuilder) -> None:
        assert builder.build_citations(None) == []

    def test_should_compute_relevance_percent(self, builder: CitationBuilder) -> None:
        citation = builder.build_citations([{"relevance": 0.876}])[0]

        assert citation.relevance == pytest.approx(0.876)
        assert citation.relevance_percent == 88


class TestBuildSourceChunks:
    """Test suite for CitationBuilder.build_source_chunks."""

    def test_should_read_nested_metadata(self, builder: CitationBuilder) -> None:
        chunk = builder.build_source_chunks(
            [{"chunk_id": "x", "full_text": "t", "metadata": {"page": 4, "chapter": "Cells"}}]
        )[0]

        assert chunk.page == 4
        assert chunk.chapter == "Cells"
        assert chunk.section == "General"

    def test_should_apply_defaults_without_metadata(self, builder: CitationBuilder) -> None:
        chunk = builder.build_source_chunks([{"chunk_id": "x", "metadata": "bogus"}])[0]

        assert (chunk.page, chunk.chapter, chunk.section, chunk.token_count) == (
            0,
            "Unknown",
            "General",
            0,
        )


class TestRelevance:
    @pytest.mark.parametrize(
        "raw,expected",
        [(1.7, 1.0), (-0.2, 0.0), (None, 0.0), ("0.25", 0.25), (math.nan, 0.0), ("high", 0.0)],
    )
    def test_clamp_relevance_should_bound_to_unit_interval(self, raw, expected) -> None:
        assert clamp_relevance(raw) == pytest.approx(expected)

    def test_relevance_percent_should_round(self) -> None:
        assert relevance_percent(0.5) == 50
        assert relevance_percent(1.0) == 100
