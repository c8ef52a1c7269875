"""API-specific dependencies."""

from .auth import create_access_token, get_current_user
from .dependencies import (
    get_conversation_service,
    get_feedback_ledger,
    get_history_paginator,
    get_inference_client,
    get_query_orchestrator,
    get_service_cache,
    get_user_service,
)

__all__ = [
    "create_access_token",
    "get_current_user",
    "get_conversation_service",
    "get_feedback_ledger",
    "get_history_paginator",
    "get_inference_client",
    "get_query_orchestrator",
    "get_service_cache",
    "get_user_service",
]
