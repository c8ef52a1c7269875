"""
Feedback API endpoints.

Routes:
- POST /feedback - Rate an assistant message
- GET /feedback/my-feedback - Caller's feedback history
- PUT /feedback/{feedback_id} - Change rating/comment
- DELETE /feedback/{feedback_id} - Remove feedback

Dependencies: gyanmitra.application.services.feedback_service
System role: Feedback HTTP API
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from gyanmitra.api.deps import get_current_user, get_feedback_ledger
from gyanmitra.api.error_handling import handle_api_errors
from gyanmitra.application.services.feedback_service import (
    DEFAULT_FEEDBACK_PAGE_SIZE,
    FeedbackLedger,
)
from gyanmitra.boundary.db.models.user_model import UserModel
from gyanmitra.models.common import MessageResponse
from gyanmitra.models.feedback import (
    FeedbackListResponse,
    FeedbackResponse,
    SubmitFeedbackRequest,
    UpdateFeedbackRequest,
)

router = APIRouter(prefix="/feedback", tags=["feedback"])


@router.post(
    "",
    response_model=FeedbackResponse,
    status_code=status.HTTP_201_CREATED,
)
@handle_api_errors
async def submit_feedback(
    request: SubmitFeedbackRequest,
    user: UserModel = Depends(get_current_user),
    ledger: FeedbackLedger = Depends(get_feedback_ledger),
) -> FeedbackResponse:
    """
    Rate an assistant message.

    A second rating for the same message returns 409 with existingFeedback.
    """
    data = await ledger.submit(user.id, request)
    return FeedbackResponse(message="Feedback submitted successfully", data=data)


@router.get("/my-feedback", response_model=FeedbackListResponse)
@handle_api_errors
async def my_feedback(
    page: int = Query(default=1),
    limit: int = Query(default=DEFAULT_FEEDBACK_PAGE_SIZE),
    rating: str | None = Query(default=None),
    user: UserModel = Depends(get_current_user),
    ledger: FeedbackLedger = Depends(get_feedback_ledger),
) -> FeedbackListResponse:
    """Caller's feedback, newest first, with conversation titles."""
    return await ledger.list_mine(user.id, page=page, limit=limit, rating=rating)


@router.put("/{feedback_id}", response_model=FeedbackResponse)
@handle_api_errors
async def update_feedback(
    feedback_id: UUID,
    request: UpdateFeedbackRequest,
    user: UserModel = Depends(get_current_user),
    ledger: FeedbackLedger = Depends(get_feedback_ledger),
) -> FeedbackResponse:
    """Change the rating and/or comment of one's own feedback."""
    data = await ledger.update(feedback_id, user.id, request)
    return FeedbackResponse(message="Feedback updated successfully", data=data)


@router.delete("/{feedback_id}", response_model=MessageResponse)
@handle_api_errors
async def delete_feedback(
    feedback_id: UUID,
    user: UserModel = Depends(get_current_user),
    ledger: FeedbackLedger = Depends(get_feedback_ledger),
) -> MessageResponse:
    """Remove one's own feedback."""
    await ledger.delete(feedback_id, user.id)
    return MessageResponse(message="Feedback deleted successfully")
