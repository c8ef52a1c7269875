"""
User profile service.

Dependencies: sqlalchemy, gyanmitra.boundary.db, gyanmitra.core.taxonomy
System role: Profile use case orchestration
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from gyanmitra.boundary.db.models.user_model import UserModel
from gyanmitra.core.exceptions import ValidationError
from gyanmitra.core.taxonomy import (
    MAX_GRADE,
    MIN_GRADE,
    PROFILE_SUBJECTS,
    SUPPORTED_LANGUAGES,
    is_supported_language,
)
from gyanmitra.models.user import UpdateProfileRequest, UserProfile

logger = logging.getLogger(__name__)


def to_profile(user: UserModel) -> UserProfile:
    return UserProfile(
        id=user.id,
        name=user.name,
        email=user.email,
        grade=user.grade,
        preferred_language=user.preferred_language,
        subjects=list(user.subjects or []),
        role=user.role,
    )


class UserService:
    """Profile read/update for the authenticated user."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def update_profile(self, user: UserModel, request: UpdateProfileRequest) -> UserProfile:
        """
        Apply a partial profile update.

        Only fields present in the request are touched. All fields are
        validated before any is applied.

        Raises:
            ValidationError: On empty name, grade out of range, unknown
                language or subject
        """
        fields = request.model_fields_set
        changes: dict = {}

        if "name" in fields:
            name = (request.name or "").strip()
            if not name:
                raise ValidationError("Name cannot be empty", field="name")
            changes["name"] = name

        if "grade" in fields:
            if request.grade is None or not MIN_GRADE <= request.grade <= MAX_GRADE:
                raise ValidationError(
                    f"Grade must be between {MIN_GRADE} and {MAX_GRADE}", field="grade"
                )
            changes["grade"] = request.grade

        if "preferred_language" in fields:
            if not is_supported_language(request.preferred_language):
                raise ValidationError(
                    f"Language must be one of: {', '.join(SUPPORTED_LANGUAGES)}",
                    field="preferredLanguage",
                )
            changes["preferred_language"] = request.preferred_language.strip().lower()

        if "subjects" in fields:
            subjects = [s.strip().lower() for s in request.subjects or []]
            invalid = [s for s in subjects if s not in PROFILE_SUBJECTS]
            if invalid:
                raise ValidationError(
                    f"Invalid subjects: {', '.join(invalid)}. "
                    f"Valid subjects are: {', '.join(PROFILE_SUBJECTS)}",
                    field="subjects",
                )
            changes["subjects"] = subjects

        for key, value in changes.items():
            setattr(user, key, value)
        await self.db.commit()

        logger.info(
            "Profile updated",
            extra={"user_id": str(user.id), "fields": sorted(changes)},
        )
        return to_profile(user)
