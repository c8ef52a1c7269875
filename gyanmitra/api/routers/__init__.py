"""API routers."""

from .conversations import router as conversations_router
from .feedback import router as feedback_router
from .health import router as health_router
from .query import router as query_router
from .users import router as users_router

__all__ = [
    "conversations_router",
    "feedback_router",
    "health_router",
    "query_router",
    "users_router",
]
