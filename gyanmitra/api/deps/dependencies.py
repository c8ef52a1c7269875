"""
Dependency injection container.

Factory functions for FastAPI dependencies. Services are built per request
around the request's session; the answer-service client is shared.

Dependencies: gyanmitra.configs, gyanmitra.application, gyanmitra.boundary
System role: DI container for service injection
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from gyanmitra.application.services import (
    ConversationService,
    FeedbackLedger,
    HistoryPaginator,
    QueryOrchestrator,
    UserService,
)
from gyanmitra.boundary.db import get_async_db
from gyanmitra.boundary.inference import InferenceClient
from gyanmitra.configs import get_settings


class ServiceCache:
    """Container for process-wide service instances."""

    def __init__(self) -> None:
        self._inference_client: InferenceClient | None = None

    @property
    def inference_client(self) -> InferenceClient:
        """Get cached answer-service client (one connection pool per process)."""
        if self._inference_client is None:
            self._inference_client = InferenceClient(get_settings().inference)
        return self._inference_client

    async def clear(self) -> None:
        """Close and drop cached instances."""
        if self._inference_client is not None:
            await self._inference_client.close()
        self._inference_client = None


_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


def get_inference_client() -> InferenceClient:
    """Get the shared answer-service client."""
    return get_service_cache().inference_client


def get_query_orchestrator(
    db: AsyncSession = Depends(get_async_db),
    inference_client: InferenceClient = Depends(get_inference_client),
) -> QueryOrchestrator:
    """
    Get query orchestrator instance.

    Args:
        db: Async database session (injected via Depends)
        inference_client: Shared answer-service client (injected via Depends)

    Returns:
        QueryOrchestrator: Orchestrator bound to this request's session
    """
    return QueryOrchestrator(db=db, inference_client=inference_client)


def get_conversation_service(db: AsyncSession = Depends(get_async_db)) -> ConversationService:
    """Get conversation service instance."""
    return ConversationService(db=db)


def get_history_paginator(db: AsyncSession = Depends(get_async_db)) -> HistoryPaginator:
    """Get history paginator instance."""
    return HistoryPaginator(db=db)


def get_feedback_ledger(db: AsyncSession = Depends(get_async_db)) -> FeedbackLedger:
    """Get feedback ledger instance."""
    return FeedbackLedger(db=db)


def get_user_service(db: AsyncSession = Depends(get_async_db)) -> UserService:
    """Get user service instance."""
    return UserService(db=db)
