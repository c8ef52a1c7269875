"""Service orchestrators."""

from .conversation_service import ConversationService
from .feedback_service import FeedbackLedger
from .history_service import HistoryPaginator
from .query_service import QueryOrchestrator
from .user_service import UserService

__all__ = [
    "ConversationService",
    "FeedbackLedger",
    "HistoryPaginator",
    "QueryOrchestrator",
    "UserService",
]
