"""
Word-level chunking for incremental answer delivery.

Dependencies: re
System role: Shared by the server stream and the client-side emulator
"""

import re

_WORD_CHUNK = re.compile(r"\s*\S+\s*")


def word_chunks(text: str) -> list[str]:
    """
    Split text into whitespace-delimited chunks.

    Each chunk keeps its surrounding whitespace so that joining the chunks
    reproduces the text.
    """
    return _WORD_CHUNK.findall(text or "")
