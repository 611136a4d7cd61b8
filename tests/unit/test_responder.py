"""Tests for the AI responder client."""

import json

import httpx
import pytest

from ai_gateway.config.errors import ResponderError
from ai_gateway.infrastructure.responder.client import AIResponderClient


def _client(settings, handler):
    return AIResponderClient(
        settings,
        httpx.AsyncClient(base_url=settings.responder_url, transport=httpx.MockTransport(handler)),
    )


@pytest.mark.asyncio
async def test_successful_reply(settings):
    client = _client(
        settings,
        lambda request: httpx.Response(
            200, json={"success": True, "response": {"message": "We open at 7:30", "data": {"open": "07:30"}}}
        ),
    )
    reply = await client.query("What are the daycare hours?")
    assert reply.success is True
    assert reply.message == "We open at 7:30"
    assert reply.data == {"open": "07:30"}


@pytest.mark.asyncio
async def test_declined_reply_carries_message(settings):
    client = _client(
        settings, lambda request: httpx.Response(200, json={"success": False, "message": "Not available"})
    )
    reply = await client.query("anything")
    assert reply.success is False
    assert reply.message == "Not available"


@pytest.mark.asyncio
async def test_posts_query_to_query_endpoint(settings):
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["body"] = request.content
        return httpx.Response(200, json={"success": True, "response": {"message": "ok"}})

    await _client(settings, handler).query("hello there")
    assert seen["path"].endswith("/api/AIAssistant/query")
    assert json.loads(seen["body"]) == {"query": "hello there"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, json={"error": "boom"}),
        httpx.Response(200, json={"success": True}),
        httpx.Response(200, json={"success": False}),
        httpx.Response(200, json=["not", "an", "object"]),
        httpx.Response(200, text="not json"),
    ],
)
async def test_failures_raise_responder_error(settings, response):
    client = _client(settings, lambda request: response)
    with pytest.raises(ResponderError):
        await client.query("What are the daycare hours?")


@pytest.mark.asyncio
async def test_transport_error_raises_responder_error(settings):
    def refuse(request):
        raise httpx.ConnectTimeout("timed out")

    with pytest.raises(ResponderError):
        await _client(settings, refuse).query("x")
