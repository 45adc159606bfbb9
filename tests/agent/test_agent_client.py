"""Tests for the chat agent client."""

import httpx
import pytest
import respx
from httpx import Response

from loka.agent.client import ChatAgentClient, ChatResponse


@pytest.mark.asyncio
@respx.mock
async def test_send_message_returns_messages():
    """Test a successful chat request returns the conversation."""
    route = respx.post("http://loka.test/api/chat/s1/chat").mock(
        return_value=Response(
            200,
            json={
                "success": True,
                "data": {
                    "messages": [
                        {"id": "m1", "role": "user", "content": "Hi", "timestamp": 1},
                        {"id": "m2", "role": "assistant", "content": "Hello!", "timestamp": 2},
                    ],
                    "isProcessing": False,
                    "model": "some-model",
                },
            },
        )
    )

    async with ChatAgentClient("http://loka.test/") as client:
        response = await client.send_message("s1", "Hi")

    assert isinstance(response, ChatResponse)
    assert response.success is True
    assert response.last_message.content == "Hello!"
    assert response.data.model == "some-model"
    assert route.calls.last.request.read() == b'{"message":"Hi"}'


@pytest.mark.asyncio
@respx.mock
async def test_send_message_with_model_and_headers():
    route = respx.post("http://loka.test/api/chat/s1/chat").mock(
        return_value=Response(200, json={"success": True, "data": {"messages": []}})
    )

    async with ChatAgentClient("http://loka.test", headers={"X-Tenant-ID": "acme"}) as client:
        response = await client.send_message("s1", "Hi", model="fast")

    request = route.calls.last.request
    assert request.headers["X-Tenant-ID"] == "acme"
    assert b'"model":"fast"' in request.read()
    assert response.last_message is None


@pytest.mark.asyncio
@respx.mock
async def test_error_status_becomes_failed_envelope():
    respx.post("http://loka.test/api/chat/s1/chat").mock(
        return_value=Response(500, json={"success": False, "error": "Agent crashed"})
    )

    async with ChatAgentClient("http://loka.test") as client:
        response = await client.send_message("s1", "Hi")

    assert response.success is False
    assert response.error == "Agent crashed"
    assert response.last_message is None


@pytest.mark.asyncio
@respx.mock
async def test_error_status_without_json_body():
    respx.post("http://loka.test/api/chat/s1/chat").mock(
        return_value=Response(502, text="Bad gateway")
    )

    async with ChatAgentClient("http://loka.test") as client:
        response = await client.send_message("s1", "Hi")

    assert response.success is False
    assert "502" in response.error


@pytest.mark.asyncio
@respx.mock
async def test_connection_error_becomes_failed_envelope():
    respx.post("http://loka.test/api/chat/s1/chat").mock(
        side_effect=httpx.ConnectError("connection refused")
    )

    async with ChatAgentClient("http://loka.test") as client:
        response = await client.send_message("s1", "Hi")

    assert response.success is False
    assert "Failed to reach chat agent" in response.error


@pytest.mark.asyncio
@respx.mock
async def test_invalid_json_becomes_failed_envelope():
    respx.post("http://loka.test/api/chat/s1/chat").mock(
        return_value=Response(200, text="<html>oops</html>")
    )

    async with ChatAgentClient("http://loka.test") as client:
        response = await client.send_message("s1", "Hi")

    assert response.success is False
    assert response.error == "Invalid response from chat agent"


@pytest.mark.asyncio
@respx.mock
async def test_get_and_clear_messages():
    respx.get("http://loka.test/api/chat/s1/messages").mock(
        return_value=Response(
            200, json={"success": True, "data": {"messages": [{"role": "user", "content": "a"}]}}
        )
    )
    respx.delete("http://loka.test/api/chat/s1/clear").mock(
        return_value=Response(200, json={"success": True, "data": {"messages": []}})
    )

    async with ChatAgentClient("http://loka.test") as client:
        fetched = await client.get_messages("s1")
        cleared = await client.clear_messages("s1")

    assert fetched.last_message.content == "a"
    assert cleared.success is True
    assert cleared.data.messages == []
