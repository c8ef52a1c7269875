"""
Test suite for the conversation history endpoints.

System role: Verification of the conversation HTTP API
"""

import uuid

import pytest

QUESTION = {"query": "What is a cell?", "grade": 6, "subject": "science"}


@pytest.fixture
async def conversation_id(client, auth_headers, student) -> str:
    response = await client.post("/api/query", json=QUESTION, headers=auth_headers(student))
    return response.json()["conversationId"]


class TestConversationDetail:
    @pytest.mark.asyncio
    async def test_detail_should_return_messages_in_order(
        self, client, auth_headers, student, conversation_id
    ) -> None:
        response = await client.get(f"/api/conversation/{conversation_id}", headers=auth_headers(student))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["title"] == "What is a cell?"
        assert data["metadata"] == {"grade": 6, "subject": "science", "language": "english"}
        user_message, assistant_message = data["messages"]
        assert set(user_message) == {"role", "content", "timestamp"}
        assert assistant_message["role"] == "assistant"
        assert [c["number"] for c in assistant_message["citations"]] == [1, 2]
        assert assistant_message["metadata"]["language"] == "english"

    @pytest.mark.asyncio
    async def test_foreign_and_missing_should_look_the_same(
        self, client, auth_headers, other_student, conversation_id
    ) -> None:
        foreign = await client.get(f"/api/conversation/{conversation_id}", headers=auth_headers(other_student))
        missing = await client.get(f"/api/conversation/{uuid.uuid4()}", headers=auth_headers(other_student))

        assert foreign.status_code == missing.status_code == 404
        assert foreign.json() == missing.json()


class TestConversationList:
    @pytest.mark.asyncio
    async def test_list_should_page_previews(self, client, auth_headers, student, conversation_id) -> None:
        response = await client.get("/api/conversation", params={"limit": 1}, headers=auth_headers(student))

        body = response.json()
        assert body["pagination"] == {
            "page": 1,
            "limit": 1,
            "total": 1,
            "totalPages": 1,
            "hasMore": False,
        }
        preview = body["data"][0]
        assert preview["id"] == conversation_id
        assert preview["messageCount"] == 2
        assert preview["lastMessage"]["content"].startswith("Photosynthesis")

    @pytest.mark.asyncio
    async def test_out_of_range_limit_should_be_400(self, client, auth_headers, student) -> None:
        response = await client.get("/api/conversation", params={"limit": 51}, headers=auth_headers(student))

        assert response.status_code == 400


class TestArchiveRestore:
    @pytest.mark.asyncio
    async def test_archive_then_restore(self, client, auth_headers, student, conversation_id) -> None:
        headers = auth_headers(student)

        archived = await client.delete(f"/api/conversation/{conversation_id}", headers=headers)
        active = (await client.get("/api/conversation", headers=headers)).json()
        archived_list = (
            await client.get("/api/conversation", params={"status": "archived"}, headers=headers)
        ).json()
        again = await client.delete(f"/api/conversation/{conversation_id}", headers=headers)
        restored = await client.put(f"/api/conversation/{conversation_id}/restore", headers=headers)

        assert archived.status_code == 200
        assert archived.json()["data"] == {"id": conversation_id, "status": "archived"}
        assert active["pagination"]["total"] == 0
        assert archived_list["pagination"]["total"] == 1
        assert again.status_code == 400
        assert restored.json()["data"]["status"] == "active"
