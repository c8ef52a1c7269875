"""Tests for word chunking used by streamed answers."""

from gyanmitra.core.text_chunks import word_chunks


def test_word_chunks_should_reassemble_exactly():
    text = "  Plants  make\nfood. "

    chunks = word_chunks(text)

    assert "".join(chunks) == text
    assert len(chunks) == 3


def test_word_chunks_should_be_empty_for_blank_text():
    assert word_chunks("") == []
    assert word_chunks("   ") == []
