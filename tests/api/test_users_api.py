"""
Test suite for the profile endpoints, including the sticky language preference.

System role: Verification of the profile HTTP API
"""

import pytest


class TestProfile:
    @pytest.mark.asyncio
    async def test_get_profile(self, client, auth_headers, student) -> None:
        response = await client.get("/api/users/profile", headers=auth_headers(student))

        data = response.json()["data"]
        assert data["email"] == "asha@example.com"
        assert data["preferredLanguage"] is None

    @pytest.mark.asyncio
    async def test_preferred_language_should_apply_to_later_queries(
        self, client, auth_headers, student
    ) -> None:
        headers = auth_headers(student)

        updated = await client.put(
            "/api/users/profile", json={"preferredLanguage": "Marathi"}, headers=headers
        )
        answer = await client.post(
            "/api/query",
            json={"query": "What is rain?", "grade": 7, "subject": "science", "language": "english"},
            headers=headers,
        )

        assert updated.json()["data"]["preferredLanguage"] == "marathi"
        assert answer.json()["language"] == "marathi"

    @pytest.mark.asyncio
    async def test_invalid_subject_should_be_400(self, client, auth_headers, student) -> None:
        response = await client.put(
            "/api/users/profile", json={"subjects": ["alchemy"]}, headers=auth_headers(student)
        )

        assert response.status_code == 400
        assert response.json()["details"]["field"] == "subjects"
