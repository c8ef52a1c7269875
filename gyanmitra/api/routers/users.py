"""
User profile API endpoints.

Routes:
- GET /users/profile - Caller's profile
- PUT /users/profile - Partial profile update

Dependencies: gyanmitra.application.services.user_service
System role: Profile HTTP API
"""

from fastapi import APIRouter, Depends

from gyanmitra.api.deps import get_current_user, get_user_service
from gyanmitra.api.error_handling import handle_api_errors
from gyanmitra.application.services.user_service import UserService, to_profile
from gyanmitra.boundary.db.models.user_model import UserModel
from gyanmitra.models.user import ProfileResponse, UpdateProfileRequest

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/profile", response_model=ProfileResponse)
@handle_api_errors
async def get_profile(user: UserModel = Depends(get_current_user)) -> ProfileResponse:
    """Caller's profile."""
    return ProfileResponse(data=to_profile(user))


@router.put("/profile", response_model=ProfileResponse)
@handle_api_errors
async def update_profile(
    request: UpdateProfileRequest,
    user: UserModel = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
) -> ProfileResponse:
    """
    Update name, grade, preferred language and/or subjects.

    The preferred language takes priority over the language sent with
    queries, for every conversation.
    """
    profile = await service.update_profile(user, request)
    return ProfileResponse(message="Profile updated successfully", data=profile)
