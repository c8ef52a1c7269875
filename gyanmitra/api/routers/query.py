"""
Query API endpoints.

Routes:
- POST /query - Ask a question (new or follow-up)
- POST /query/stream - Same workflow, answer replayed as Server-Sent Events
- GET /query/health - Answer service health
- GET /query/model-info - Answer service model information

Dependencies: gyanmitra.application.services.query_service
System role: Query HTTP API
"""

import logging
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from gyanmitra.api.deps import get_current_user, get_inference_client, get_query_orchestrator
from gyanmitra.api.error_handling import handle_api_errors
from gyanmitra.application.services.query_service import QueryOrchestrator, validate_query
from gyanmitra.boundary.db.models.user_model import UserModel
from gyanmitra.boundary.inference import InferenceClient
from gyanmitra.models.query import QueryRequest, QueryResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/query", tags=["query"])


@router.post("", response_model=QueryResponse)
@handle_api_errors
async def submit_query(
    request: QueryRequest,
    user: UserModel = Depends(get_current_user),
    orchestrator: QueryOrchestrator = Depends(get_query_orchestrator),
) -> QueryResponse:
    """
    Answer a question and record the turn.

    Omit conversationId to start a conversation; pass it to follow up.
    On an answer-service failure the question is still saved and the 503
    body carries conversationId for retrying in the same thread.
    """
    return await orchestrator.process_query(request, user)


@router.post("/stream")
@handle_api_errors
async def stream_query(
    request: QueryRequest,
    user: UserModel = Depends(get_current_user),
    orchestrator: QueryOrchestrator = Depends(get_query_orchestrator),
) -> StreamingResponse:
    """
    Answer a question and deliver it as Server-Sent Events.

    SSE Format:
        data: {"type": "token", "content": "..."}
        data: {"type": "citation", "citation": {...}}
        data: {"type": "done", "conversationId": "...", "isNewConversation": true, ...}
        data: {"type": "error", "error": "...", "conversationId": "..."}

    An invalid request is rejected with 400 before the stream opens.
    """
    validate_query(request)
    events = orchestrator.stream_query(request, user)
    # The workflow runs while producing the first event; await it here so it
    # completes inside the request's database session.
    first = await anext(events)

    async def event_generator() -> AsyncGenerator[str, None]:
        yield first.to_sse()
        async for event in events:
            yield event.to_sse()

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


@router.get("/health")
async def inference_health(
    user: UserModel = Depends(get_current_user),
    inference_client: InferenceClient = Depends(get_inference_client),
) -> dict:
    """Answer service health; reports errors in the body rather than failing."""
    return await inference_client.check_health()


@router.get("/model-info")
@handle_api_errors
async def model_info(
    user: UserModel = Depends(get_current_user),
    inference_client: InferenceClient = Depends(get_inference_client),
) -> dict:
    """Model information reported by the answer service."""
    return {"success": True, "data": await inference_client.get_model_info()}
