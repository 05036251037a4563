"""Pruebas del cliente de la Send API y la Messenger Profile API."""

import json

import httpx
import pytest

from app.models.outbound import Reply, SenderAction
from app.services.messenger import MessengerAPIError, MessengerClient


def _client(settings, handler):
    return MessengerClient(settings, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_send_posts_message_with_access_token(settings):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = request.url
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"recipient_id": "u1", "message_id": "mid.1"})

    body = await _client(settings, handler).send(Reply(recipient_id="u1", message={"text": "hola"}))

    assert body["message_id"] == "mid.1"
    assert seen["url"].path.endswith("/me/messages")
    assert seen["url"].params["access_token"] == settings.PAGE_ACCESS_TOKEN
    assert seen["body"] == {"recipient": {"id": "u1"}, "message": {"text": "hola"}}


@pytest.mark.asyncio
async def test_send_sender_action(settings):
    seen = {}

    def handler(request):
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"recipient_id": "u1"})

    await _client(settings, handler).send(Reply(recipient_id="u1", sender_action=SenderAction.TYPING_ON))

    assert seen["body"] == {"recipient": {"id": "u1"}, "sender_action": "typing_on"}


@pytest.mark.asyncio
async def test_error_status_raises_domain_error(settings):
    def handler(request):
        return httpx.Response(400, json={"error": {"message": "Invalid OAuth access token"}})

    with pytest.raises(MessengerAPIError):
        await _client(settings, handler).send(Reply(recipient_id="u1", message={"text": "hola"}))


@pytest.mark.asyncio
async def test_transport_error_raises_domain_error(settings):
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    with pytest.raises(MessengerAPIError):
        await _client(settings, handler).send(Reply(recipient_id="u1", message={"text": "hola"}))


@pytest.mark.asyncio
async def test_non_json_success_body_raises_domain_error(settings):
    def handler(request):
        return httpx.Response(200, text="<html>ok</html>")

    with pytest.raises(MessengerAPIError, match="no JSON"):
        await _client(settings, handler).send(Reply(recipient_id="u1", message={"text": "hola"}))


@pytest.mark.asyncio
async def test_persistent_menu_add_and_remove(settings):
    calls = []

    def handler(request):
        calls.append((request.method, request.url.path, json.loads(request.content)))
        return httpx.Response(200, json={"result": "success"})

    client = _client(settings, handler)
    await client.set_persistent_menu("GET_STARTED_PAYLOAD", {"locale": "default", "call_to_actions": []})
    await client.remove_persistent_menu()

    assert [method for method, _, _ in calls] == ["POST", "POST", "DELETE"]
    assert all(path.endswith("/me/messenger_profile") for _, path, _ in calls)
    assert calls[0][2] == {"get_started": {"payload": "GET_STARTED_PAYLOAD"}}
    assert calls[1][2]["persistent_menu"][0]["locale"] == "default"
    assert calls[2][2] == {"fields": ["persistent_menu"]}


def test_reply_requires_exactly_one_body():
    with pytest.raises(ValueError):
        Reply(recipient_id="u1")
    with pytest.raises(ValueError):
        Reply(recipient_id="u1", message={"text": "x"}, sender_action=SenderAction.MARK_SEEN)
