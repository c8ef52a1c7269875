"""
Conversation API endpoints.

Routes:
- GET /conversation - Paginated history previews
- GET /conversation/{conversation_id} - Full conversation
- DELETE /conversation/{conversation_id} - Archive (soft delete)
- PUT /conversation/{conversation_id}/restore - Restore from archive

Dependencies: gyanmitra.application.services
System role: Conversation HTTP API
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from gyanmitra.api.deps import (
    get_conversation_service,
    get_current_user,
    get_history_paginator,
)
from gyanmitra.api.error_handling import handle_api_errors
from gyanmitra.application.services.conversation_service import ConversationService
from gyanmitra.application.services.history_service import DEFAULT_PAGE_SIZE, HistoryPaginator
from gyanmitra.boundary.db.models.user_model import UserModel
from gyanmitra.models.conversation import (
    ConversationDetailResponse,
    ConversationListResponse,
    ConversationStatusResponse,
)

router = APIRouter(prefix="/conversation", tags=["conversations"])


@router.get("", response_model=ConversationListResponse)
@handle_api_errors
async def list_conversations(
    page: int = Query(default=1),
    limit: int = Query(default=DEFAULT_PAGE_SIZE),
    status: str = Query(default="active"),
    subject: str | None = Query(default=None),
    grade: int | None = Query(default=None),
    user: UserModel = Depends(get_current_user),
    paginator: HistoryPaginator = Depends(get_history_paginator),
) -> ConversationListResponse:
    """List the caller's conversations, most recently updated first."""
    return await paginator.list_conversations(
        user.id, page=page, limit=limit, status=status, subject=subject, grade=grade
    )


@router.get("/{conversation_id}", response_model=ConversationDetailResponse)
@handle_api_errors
async def get_conversation(
    conversation_id: UUID,
    user: UserModel = Depends(get_current_user),
    service: ConversationService = Depends(get_conversation_service),
) -> ConversationDetailResponse:
    """Full conversation with every message in turn order."""
    return ConversationDetailResponse(data=await service.get_detail(conversation_id, user.id))


@router.delete("/{conversation_id}", response_model=ConversationStatusResponse)
@handle_api_errors
async def archive_conversation(
    conversation_id: UUID,
    user: UserModel = Depends(get_current_user),
    service: ConversationService = Depends(get_conversation_service),
) -> ConversationStatusResponse:
    """Archive a conversation; it is never hard-deleted."""
    data = await service.archive(conversation_id, user.id)
    return ConversationStatusResponse(message="Conversation archived successfully", data=data)


@router.put("/{conversation_id}/restore", response_model=ConversationStatusResponse)
@handle_api_errors
async def restore_conversation(
    conversation_id: UUID,
    user: UserModel = Depends(get_current_user),
    service: ConversationService = Depends(get_conversation_service),
) -> ConversationStatusResponse:
    """Move an archived conversation back to the active list."""
    data = await service.restore(conversation_id, user.id)
    return ConversationStatusResponse(message="Conversation restored successfully", data=data)
