"""
Test suite for UserService profile updates.

System role: Verification of the profile use case
"""

import pytest

from gyanmitra.application.services.user_service import UserService
from gyanmitra.boundary.db import user_crud
from gyanmitra.core.exceptions import ValidationError
from gyanmitra.models.user import UpdateProfileRequest


class TestUpdateProfile:
    """Test suite for UserService.update_profile."""

    @pytest.mark.asyncio
    async def test_should_update_only_given_fields(self, db_session, student) -> None:
        # Arrange
        user = await user_crud.get_by_id(db_session, student.id)

        # Act
        profile = await UserService(db_session).update_profile(
            user, UpdateProfileRequest(preferred_language="Hindi", subjects=["Math", "science"])
        )

        # Assert
        assert profile.preferred_language == "hindi"
        assert profile.subjects == ["math", "science"]
        assert profile.name == "Asha"
        assert profile.grade == 7

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "fields",
        [
            {"name": "   "},
            {"name": "Changed", "grade": 4},
            {"name": "Changed", "preferred_language": "klingon"},
            {"name": "Changed", "subjects": ["science", "astrology"]},
        ],
    )
    async def test_invalid_fields_should_change_nothing(self, db_session, student, fields) -> None:
        user = await user_crud.get_by_id(db_session, student.id)
        request = UpdateProfileRequest(**fields)

        with pytest.raises(ValidationError):
            await UserService(db_session).update_profile(user, request)

        assert user.name == "Asha"
