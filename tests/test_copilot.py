import json

import httpx
import pytest

from services.copilot import (
    CopilotClient,
    CopilotError,
    CopilotNotConfigured,
    extract_message_text,
    interpret_message,
)


def workflow_response(results: dict) -> dict:
    return {"outputs": [{"outputs": [results]}]}


@pytest.mark.parametrize("results", [
    {"results": {"message": {"text": "Hello"}}},
    {"results": {"message": {"data": {"text": "Hello"}}}},
    {"artifacts": {"message": "Hello"}},
    {"messages": [{"message": "Hello"}]},
])
def test_extract_message_text_paths(results):
    assert extract_message_text(workflow_response(results)) == "Hello"


def test_extract_message_text_skips_blank_entries():
    data = workflow_response({
        "results": {"message": {"text": "  "}},
        "artifacts": {"message": "Fallback"},
    })

    assert extract_message_text(data) == "Fallback"


def test_extract_message_text_missing():
    assert extract_message_text({"outputs": []}) is None


def test_plain_text_reply():
    reply = interpret_message("  The tender closes on Friday. ")

    assert reply.reply == "The tender closes on Friday."
    assert reply.navigate_to is None


def test_navigation_envelope():
    text = json.dumps({"tonavigate": "1", "rsp": "Opening bidders", "navto": "/tenders/t1/bidders"})

    reply = interpret_message(text)

    assert reply.reply == "Opening bidders"
    assert reply.navigate_to == "/tenders/t1/bidders"


def test_navigation_envelope_without_target():
    reply = interpret_message(json.dumps({"tonavigate": "1", "navto": " "}))

    assert reply.navigate_to is None
    assert reply.reply == "Navigation requested but no valid URL provided."


def test_legacy_envelope_keys():
    text = json.dumps({"tonavigate": "0", "message": "Nothing to open"})

    assert interpret_message(text).reply == "Nothing to open"


@pytest.mark.asyncio
async def test_chat_posts_workflow_payload():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["headers"] = request.headers
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=workflow_response({"results": {"message": {"text": "Hi"}}}))

    client = CopilotClient(
        workflow_url="http://workflow.test/run",
        api_key="key-123",
        transport=httpx.MockTransport(handler),
    )
    reply = await client.chat("hello")

    assert reply.reply == "Hi"
    assert seen["headers"]["x-api-key"] == "key-123"
    assert seen["body"] == {"input_value": "hello", "output_type": "chat", "input_type": "chat"}


@pytest.mark.asyncio
async def test_chat_not_configured():
    client = CopilotClient(workflow_url="", api_key=None)
    client.workflow_url = None

    with pytest.raises(CopilotNotConfigured):
        await client.chat("hello")


@pytest.mark.asyncio
async def test_chat_upstream_error():
    client = CopilotClient(
        workflow_url="http://workflow.test/run",
        transport=httpx.MockTransport(lambda request: httpx.Response(503)),
    )

    with pytest.raises(CopilotError, match="503"):
        await client.chat("hello")


@pytest.mark.asyncio
async def test_chat_response_without_message():
    client = CopilotClient(
        workflow_url="http://workflow.test/run",
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"outputs": []})),
    )

    with pytest.raises(CopilotError, match="No message"):
        await client.chat("hello")


def test_chat_endpoint_not_configured(client, auth_headers):
    response = client.post("/api/copilot/chat", json={"message": "hello"}, headers=auth_headers)

    assert response.status_code == 503


def test_chat_endpoint_replies(client, auth_headers):
    from api.main import app
    from services.copilot import get_copilot_client

    envelope = json.dumps({"tonavigate": "1", "rsp": "Opening reports", "navto": "/reports"})
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, json=workflow_response({"results": {"message": {"text": envelope}}}))
    )
    app.dependency_overrides[get_copilot_client] = lambda: CopilotClient(
        workflow_url="http://workflow.test/run",
        transport=transport,
    )

    response = client.post("/api/copilot/chat", json={"message": "show reports"}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {"reply": "Opening reports", "navigate_to": "/reports"}


def test_chat_endpoint_upstream_failure(client, auth_headers):
    from api.main import app
    from services.copilot import get_copilot_client

    app.dependency_overrides[get_copilot_client] = lambda: CopilotClient(
        workflow_url="http://workflow.test/run",
        transport=httpx.MockTransport(lambda request: httpx.Response(500)),
    )

    response = client.post("/api/copilot/chat", json={"message": "hello"}, headers=auth_headers)

    assert response.status_code == 502
