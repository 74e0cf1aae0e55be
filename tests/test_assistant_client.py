import asyncio
import json

import httpx

from client.assistant_client import NETWORK_MESSAGE, TIMEOUT_MESSAGE, AssistantClient
from client.context import StaticSession
from core.errors import GENERIC_RETRY_MESSAGE

URL = "http://assistant.test/api/ai-assistant"


def _client(handler, timeout=30.0):
    session = StaticSession(user_id="u1", access_token="tok")
    return AssistantClient(URL, session, timeout=timeout, transport=httpx.MockTransport(handler))


def test_request_contract(sample_context):
    seen = {}

    def handler(request):
        seen["body"] = json.loads(request.content)
        seen["auth"] = request.headers["Authorization"]
        return httpx.Response(200, json={"response": "Hello Ada"})

    reply = asyncio.run(_client(handler).ask("What's my balance?", sample_context))

    assert reply.response == "Hello Ada"
    assert reply.error is None
    assert reply.actions == []
    assert seen["auth"] == "Bearer tok"
    assert seen["body"]["message"] == "What's my balance?"
    assert seen["body"]["userId"] == "u1"
    ctx = seen["body"]["financialContext"]
    assert ctx["availableBalance"] == 100000
    assert ctx["activePlanCount"] == 1
    assert ctx["recentTransactions"][0]["type"] == "deposit"


def test_actions_are_returned(sample_context):
    body = {"response": "Top up first.", "actions": [{"label": "Add Funds", "route": "/add-funds"}]}
    reply = asyncio.run(_client(lambda r: httpx.Response(200, json=body)).ask("hi", sample_context))
    assert reply.actions[0].route == "/add-funds"


def test_server_error_without_body_gives_generic_text(sample_context):
    reply = asyncio.run(_client(lambda r: httpx.Response(500)).ask("hi", sample_context))
    assert reply.response == GENERIC_RETRY_MESSAGE
    assert reply.error == "http_500"


def test_server_error_message_is_shown(sample_context):
    body = {"error": "Failed to get AI response", "response": "Usage limit reached."}
    reply = asyncio.run(_client(lambda r: httpx.Response(500, json=body)).ask("hi", sample_context))
    assert reply.response == "Usage limit reached."
    assert reply.error == "http_500"


def test_timeout(sample_context):
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    reply = asyncio.run(_client(handler, timeout=0.01).ask("hi", sample_context))
    assert reply.response == TIMEOUT_MESSAGE
    assert reply.error == "timeout"


def test_network_failure(sample_context):
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    reply = asyncio.run(_client(handler).ask("hi", sample_context))
    assert reply.response == NETWORK_MESSAGE
    assert reply.error == "network"


def test_malformed_success_body(sample_context):
    reply = asyncio.run(_client(lambda r: httpx.Response(200, text="<html>")).ask("hi", sample_context))
    assert reply.response == GENERIC_RETRY_MESSAGE
    assert reply.error == "malformed_reply"
