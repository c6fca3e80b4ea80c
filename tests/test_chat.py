"""
Tests for the chat relay route. The upstream model API is a MockTransport.
"""

import json

import httpx
import pytest

from retirewise.core.config import settings


class FakeUpstream:
    def __init__(self):
        self.requests = []
        self.status_code = 200
        self.body = {"id": "msg_1", "content": [{"type": "text", "text": "Hello"}]}
        self.error = None

    def handler(self, request):
        self.requests.append(request)
        if self.error:
            raise self.error
        return httpx.Response(self.status_code, json=self.body)


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
async def chat_client(app, monkeypatch, upstream):
    client = httpx.AsyncClient(transport=httpx.MockTransport(upstream.handler))
    monkeypatch.setattr(app.state, "chat_client", client)
    monkeypatch.setattr(settings, "ANTHROPIC_API_KEY", "test-key")
    yield client
    await client.aclose()


class TestChatRelay:

    @pytest.mark.asyncio
    async def test_forwards_request(self, api_client, chat_client, upstream):
        messages = [{"role": "user", "content": "How should I plan my week?"}]

        response = await api_client.post("/api/chat", json={"messages": messages, "system": "Be brief"})

        assert response.status_code == 200
        assert response.json() == upstream.body
        sent = upstream.requests[0]
        payload = json.loads(sent.content)
        assert sent.headers["x-api-key"] == "test-key"
        assert sent.headers["anthropic-version"] == settings.ANTHROPIC_VERSION
        assert payload["messages"] == messages
        assert payload["system"] == "Be brief"
        assert payload["model"] == settings.CHAT_MODEL
        assert payload["max_tokens"] == settings.CHAT_MAX_TOKENS
        assert "tools" not in payload

    @pytest.mark.asyncio
    async def test_upstream_error_passed_through(self, api_client, chat_client, upstream):
        upstream.status_code = 429
        upstream.body = {"type": "error", "error": {"type": "rate_limit_error"}}

        response = await api_client.post("/api/chat", json={"messages": []})

        assert response.status_code == 429
        assert response.json() == upstream.body

    @pytest.mark.asyncio
    async def test_transport_failure(self, api_client, chat_client, upstream):
        upstream.error = httpx.ConnectError("connection refused")

        response = await api_client.post("/api/chat", json={"messages": []})

        assert response.status_code == 500
        assert response.json() == {"error": "connection refused"}

    @pytest.mark.asyncio
    async def test_missing_key(self, api_client, chat_client, monkeypatch, upstream):
        monkeypatch.setattr(settings, "ANTHROPIC_API_KEY", "")

        response = await api_client.post("/api/chat", json={"messages": []})

        assert response.status_code == 500
        assert "error" in response.json()
        assert upstream.requests == []
