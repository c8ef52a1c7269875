"""
Test suite for answer-service outages seen through the API.

The answer service is offline for every test in this module.

System role: Verification of retry-friendly failure responses
"""

import json

import pytest

from tests.support import offline_handler

QUESTION = {"query": "What is gravity?", "grade": 8, "subject": "science"}


@pytest.fixture
def inference_handler():
    return offline_handler


class TestUpstreamFailure:
    @pytest.mark.asyncio
    async def test_query_should_be_503_with_conversation_id(self, client, auth_headers, student) -> None:
        # Act
        response = await client.post("/api/query", json=QUESTION, headers=auth_headers(student))

        # Assert
        assert response.status_code == 503
        body = response.json()
        assert body["success"] is False
        assert body["conversationId"]
        assert "details" not in body

        detail = await client.get(f"/api/conversation/{body['conversationId']}", headers=auth_headers(student))
        messages = detail.json()["data"]["messages"]
        assert [m["role"] for m in messages] == ["user"]
        assert messages[0]["content"] == "What is gravity?"

    @pytest.mark.asyncio
    async def test_retry_should_append_to_same_conversation(self, client, auth_headers, student) -> None:
        headers = auth_headers(student)
        first = (await client.post("/api/query", json=QUESTION, headers=headers)).json()

        retry = await client.post(
            "/api/query", json={**QUESTION, "conversationId": first["conversationId"]}, headers=headers
        )

        assert retry.json()["conversationId"] == first["conversationId"]
        detail = await client.get(f"/api/conversation/{first['conversationId']}", headers=headers)
        assert detail.json()["data"]["messageCount"] == 2

    @pytest.mark.asyncio
    async def test_stream_should_send_error_event_with_conversation_id(
        self, client, auth_headers, student
    ) -> None:
        response = await client.post("/api/query/stream", json=QUESTION, headers=auth_headers(student))

        events = [
            json.loads(line[len("data: "):])
            for line in response.text.splitlines()
            if line.startswith("data: ")
        ]
        assert len(events) == 1
        assert events[0]["type"] == "error"
        assert events[0]["conversationId"]

    @pytest.mark.asyncio
    async def test_model_info_should_be_503(self, client, auth_headers, student) -> None:
        response = await client.get("/api/query/model-info", headers=auth_headers(student))

        assert response.status_code == 503

    @pytest.mark.asyncio
    async def test_inference_health_should_report_error_in_body(self, client, auth_headers, student) -> None:
        response = await client.get("/api/query/health", headers=auth_headers(student))

        assert response.status_code == 200
        assert response.json()["status"] == "error"
