"""Pruebas del enrutamiento de eventos de punta a punta por el gestor."""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from app.models.message import WebhookPayload
from app.services.conversation.session_store import ConversationState
from tests.helpers import ADMIN_ID, USER_ID, make_event, quick_reply_event, sent_messages, text_event


@pytest.mark.asyncio
async def test_echo_is_only_logged(manager, messenger, apis):
    await manager.process_event(make_event(message={"mid": "m.1", "text": "hola", "is_echo": True, "app_id": 1}))

    messenger.send.assert_not_awaited()
    apis.profiles.get_user_profile.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize("command, attachment_type", [
    ("image", "image"), ("GIF", "image"), ("audio", "audio"), ("Video", "video"), ("file", "file"),
])
async def test_media_commands_send_attachments(manager, messenger, command, attachment_type):
    await manager.process_event(text_event(command))

    [payload] = sent_messages(messenger)
    assert payload["message"]["attachment"]["type"] == attachment_type
    assert payload["message"]["attachment"]["payload"]["url"].startswith("http")


@pytest.mark.asyncio
@pytest.mark.parametrize("command, template_type", [("button", "button"), ("generic", "generic")])
async def test_template_commands(manager, messenger, command, template_type):
    await manager.process_event(text_event(command))

    [payload] = sent_messages(messenger)
    assert payload["message"]["attachment"]["payload"]["template_type"] == template_type


@pytest.mark.asyncio
async def test_quick_reply_command(manager, messenger):
    await manager.process_event(text_event("quick reply"))

    [payload] = sent_messages(messenger)
    assert payload["message"]["quick_replies"][-1] == {"content_type": "location"}


@pytest.mark.asyncio
@pytest.mark.parametrize("command, action", [
    ("read receipt", "mark_seen"), ("typing on", "typing_on"), ("typing off", "typing_off"),
])
async def test_sender_action_commands(manager, messenger, command, action):
    await manager.process_event(text_event(command))

    assert sent_messages(messenger) == [{"recipient": {"id": USER_ID}, "sender_action": action}]


@pytest.mark.asyncio
async def test_user_info_replies_with_cached_first_name(manager, messenger):
    await manager.process_event(text_event("user info"))

    assert sent_messages(messenger)[0]["message"] == {"text": "Ana"}


@pytest.mark.asyncio
async def test_menu_commands_call_profile_api_without_reply(manager, messenger):
    await manager.process_event(text_event("add menu"))
    await manager.process_event(text_event("remove menu"))

    messenger.set_persistent_menu.assert_awaited_once()
    messenger.remove_persistent_menu.assert_awaited_once()
    messenger.send.assert_not_awaited()


@pytest.mark.asyncio
async def test_non_admin_cannot_stop_bot(manager, messenger, bot_state):
    await manager.process_event(text_event("stop", sender_id=USER_ID))

    assert not bot_state.stopped
    messenger.send.assert_not_awaited()


@pytest.mark.asyncio
async def test_admin_stop_silences_text_and_postbacks_until_start(manager, messenger, bot_state):
    await manager.process_event(text_event("stop", sender_id=ADMIN_ID))
    assert bot_state.stopped

    await manager.process_event(text_event("home"))
    await manager.process_event(make_event(postback={"payload": "HOME"}))
    await manager.process_event(make_event(optin={"ref": "abc"}))
    messenger.send.assert_not_awaited()

    await manager.process_event(text_event("Start", sender_id=ADMIN_ID))
    assert bot_state.stopped

    await manager.process_event(text_event("start", sender_id=USER_ID))
    assert bot_state.stopped

    await manager.process_event(text_event("start", sender_id=ADMIN_ID))
    assert not bot_state.stopped

    await manager.process_event(text_event("home"))
    messenger.send.assert_awaited_once()


@pytest.mark.asyncio
async def test_quick_reply_bypasses_kill_switch(manager, messenger, bot_state, content_store):
    bot_state.stop()

    await manager.process_event(quick_reply_event("HOME"))

    assert sent_messages(messenger)[0]["message"] == content_store.get_builtin("HOME")


@pytest.mark.asyncio
async def test_postback_payload_goes_to_keyword_engine(manager, messenger, content_store):
    await manager.process_event(make_event(postback={"payload": "CONTACT", "title": "Top 10"}))

    assert sent_messages(messenger)[0]["message"] == content_store.get_builtin("CONTACT")


@pytest.mark.asyncio
async def test_attachment_url_is_used_as_keyword(manager, messenger, bot_state):
    url = "https://cdn.example.test/sticker.png"
    await manager.process_event(make_event(message={
        "mid": "m.3", "attachments": [{"type": "image", "payload": {"url": url}}]
    }))

    assert bot_state.sessions.get(USER_ID).last_keyword_sent == url.upper()
    assert sent_messages(messenger)[0]["message"]["quick_replies"][0]["payload"] == "HOME"


@pytest.mark.asyncio
async def test_optin_is_acknowledged(manager, messenger):
    await manager.process_event(make_event(optin={"ref": "PASS_THROUGH"}))

    assert sent_messages(messenger)[0]["message"] == {"text": "Autenticación exitosa"}


@pytest.mark.asyncio
async def test_delivery_and_read_are_only_logged(manager, messenger, apis):
    await manager.process_event(make_event(delivery={"mids": ["mid.1"], "watermark": 1}))
    await manager.process_event(make_event(read={"watermark": 1}))

    messenger.send.assert_not_awaited()
    apis.profiles.get_user_profile.assert_not_awaited()


@pytest.mark.asyncio
async def test_send_a_message_relays_next_text_to_admin(manager, messenger, bot_state):
    await manager.process_event(make_event(postback={"payload": "SEND A MESSAGE"}))
    messenger.send.reset_mock()

    await manager.process_event(text_event("Hola administrador"))

    payloads = sent_messages(messenger)
    assert payloads[0] == {"recipient": {"id": ADMIN_ID}, "message": {"text": "Hola administrador"}}
    assert payloads[1]["recipient"] == {"id": USER_ID}
    assert bot_state.sessions.get(USER_ID).last_keyword_sent is None


@pytest.mark.asyncio
async def test_emoji_gets_random_emoji_back(manager, messenger, content_store):
    with patch("app.services.conversation.free_text_handler.random.choice", return_value="🐼"):
        await manager.process_event(text_event("😀 hola"))

    assert sent_messages(messenger)[0]["message"] == {"text": "🐼"}


@pytest.mark.asyncio
async def test_unexpected_error_degrades_to_unknown_reply(manager, messenger):
    manager.engine._dispatch = AsyncMock(side_effect=RuntimeError("boom"))

    await manager.process_event(text_event("home"))

    assert sent_messages(messenger)[0]["message"]["quick_replies"][0]["payload"] == "HOME"


@pytest.mark.asyncio
async def test_send_failure_is_only_logged(manager, messenger):
    from app.services.messenger import MessengerAPIError
    messenger.send.side_effect = MessengerAPIError("rejected")

    replies = await manager.process_event(text_event("home"))

    assert len(replies) == 1


@pytest.mark.asyncio
async def test_events_of_one_sender_are_serialized(manager):
    active = 0
    peak = 0

    async def slow_route(event, session):
        nonlocal active, peak
        active += 1
        peak = max(peak, active)
        await asyncio.sleep(0.01)
        active -= 1
        return []

    manager.router.route = slow_route
    await asyncio.gather(
        manager.process_event(text_event("uno")),
        manager.process_event(text_event("dos")),
    )
    assert peak == 1

    await asyncio.gather(
        manager.process_event(text_event("uno", sender_id="a")),
        manager.process_event(text_event("dos", sender_id="b")),
    )
    assert peak == 2


@pytest.mark.asyncio
async def test_flow_text_is_not_treated_as_system_command_prefix(manager, bot_state):
    await manager.process_event(text_event("add keyword"))
    await manager.process_event(text_event("images"))

    session = bot_state.sessions.get(USER_ID)
    assert session.pending_keyword == "IMAGES"
    assert session.state is ConversationState.AWAITING_KEYWORD_NAME


@pytest.mark.asyncio
async def test_event_without_sender_id_is_skipped_and_batch_continues(manager, messenger, apis):
    payload = WebhookPayload.model_validate({
        "object": "page",
        "entry": [{
            "id": "page-1",
            "messaging": [
                {"sender": {"user_ref": "ref-123"}, "recipient": {"id": "page-1"}, "optin": {"ref": "checkbox"}},
                {"sender": {"id": USER_ID}, "recipient": {"id": "page-1"}, "message": {"mid": "m.1", "text": "home"}},
            ],
        }],
    })

    await manager.process_payload(payload)

    assert [p["recipient"]["id"] for p in sent_messages(messenger)] == [USER_ID]
    apis.profiles.get_user_profile.assert_awaited_once_with(USER_ID)
