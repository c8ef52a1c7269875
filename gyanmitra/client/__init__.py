"""Client SDK: response streaming and feedback with a local cache."""

from gyanmitra.client.errors import StreamFailedError, raise_for_api_error
from gyanmitra.client.feedback import FeedbackClient
from gyanmitra.client.feedback_cache import (
    CachedFeedback,
    FeedbackCache,
    FeedbackStatistics,
    InMemoryFeedbackCache,
)
from gyanmitra.client.streaming import (
    CancellationToken,
    ResponseStreamer,
    StreamResult,
    StreamUpdate,
    StreamUpdateType,
)

__all__ = [
    "CachedFeedback",
    "CancellationToken",
    "FeedbackCache",
    "FeedbackClient",
    "FeedbackStatistics",
    "InMemoryFeedbackCache",
    "ResponseStreamer",
    "StreamFailedError",
    "StreamResult",
    "StreamUpdate",
    "StreamUpdateType",
    "raise_for_api_error",
]
