"""
Streaming event schemas.

Framed records sent on the query stream: one ``data: {...}`` line per
record, separated by a blank line.

Dependencies: pydantic
System role: Streaming protocol schemas
"""

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel


class StreamEventType(str, Enum):
    """Server-to-client record types."""

    TOKEN = "token"
    CITATION = "citation"
    DONE = "done"
    ERROR = "error"


class StreamEvent(BaseModel):
    """
    Single stream record.

    Attributes:
        type: Record type
        data: Type-specific fields merged into the record body
    """

    type: StreamEventType
    data: dict[str, Any] = {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {"type": self.type.value, **self.data}

    def to_sse(self) -> str:
        """Frame as a server-sent-events record."""
        return f"data: {json.dumps(self.to_dict(), default=str)}\n\n"
