"""
Client-side feedback cache.

Remembers which assistant messages the user has already rated so a UI can
render the state without a round trip. The cache sits behind a small
interface so callers can swap the in-memory store for persistent storage.

Dependencies: None
System role: Local feedback state for clients
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import UUID


@dataclass
class CachedFeedback:
    """Locally remembered rating for one message."""

    rating: str
    comment: str | None = None
    feedback_id: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> "CachedFeedback":
        """Build from a feedback record or an ``existingFeedback`` snapshot."""
        timestamp = data.get("timestamp")
        if isinstance(timestamp, str):
            timestamp = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
        return cls(
            rating=str(data.get("rating", "")),
            comment=data.get("comment"),
            feedback_id=str(data["id"]) if data.get("id") else None,
            timestamp=timestamp or datetime.now(timezone.utc),
        )


@dataclass
class FeedbackStatistics:
    """Aggregate counts over cached ratings."""

    total: int = 0
    positive: int = 0
    negative: int = 0

    @property
    def positive_percentage(self) -> int:
        if not self.total:
            return 0
        return round(self.positive / self.total * 100)


class FeedbackCache(ABC):
    """Storage interface for cached ratings keyed by (conversation, message)."""

    @abstractmethod
    def get(self, conversation_id: UUID | str, message_index: int) -> CachedFeedback | None:
        ...

    @abstractmethod
    def put(self, conversation_id: UUID | str, message_index: int, feedback: CachedFeedback) -> None:
        ...

    @abstractmethod
    def remove(self, conversation_id: UUID | str, message_index: int) -> None:
        ...

    @abstractmethod
    def clear_conversation(self, conversation_id: UUID | str) -> int:
        """Drop every entry of one conversation and return how many went."""

    @abstractmethod
    def entries(self) -> list[CachedFeedback]:
        ...

    def has_feedback(self, conversation_id: UUID | str, message_index: int) -> bool:
        return self.get(conversation_id, message_index) is not None

    def statistics(self) -> FeedbackStatistics:
        stats = FeedbackStatistics()
        for entry in self.entries():
            stats.total += 1
            if entry.rating == "positive":
                stats.positive += 1
            elif entry.rating == "negative":
                stats.negative += 1
        return stats


class InMemoryFeedbackCache(FeedbackCache):
    """Dictionary-backed cache, lost when the process exits."""

    def __init__(self) -> None:
        self._entries: dict[tuple[str, int], CachedFeedback] = {}

    @staticmethod
    def _key(conversation_id: UUID | str, message_index: int) -> tuple[str, int]:
        return str(conversation_id), int(message_index)

    def get(self, conversation_id, message_index):
        return self._entries.get(self._key(conversation_id, message_index))

    def put(self, conversation_id, message_index, feedback):
        self._entries[self._key(conversation_id, message_index)] = feedback

    def remove(self, conversation_id, message_index):
        self._entries.pop(self._key(conversation_id, message_index), None)

    def clear_conversation(self, conversation_id):
        target = str(conversation_id)
        doomed = [key for key in self._entries if key[0] == target]
        for key in doomed:
            del self._entries[key]
        return len(doomed)

    def entries(self):
        return list(self._entries.values())
