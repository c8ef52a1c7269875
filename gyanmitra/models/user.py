"""
User profile schemas.

Dependencies: pydantic
System role: Profile API contracts
"""

from uuid import UUID

from gyanmitra.models.common import CamelModel


class UserProfile(CamelModel):
    """Profile fields safe to return to the owner."""

    id: UUID
    name: str
    email: str
    grade: int | None = None
    preferred_language: str | None = None
    subjects: list[str] = []
    role: str = "user"


class UpdateProfileRequest(CamelModel):
    """Partial profile update; omitted fields are left unchanged."""

    name: str | None = None
    grade: int | None = None
    preferred_language: str | None = None
    subjects: list[str] | None = None


class ProfileResponse(CamelModel):
    """Profile read/update response."""

    success: bool = True
    message: str | None = None
    data: UserProfile
