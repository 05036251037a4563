"""Constructores de eventos y utilidades de aserción para las pruebas."""

from typing import Any, Dict
from unittest.mock import MagicMock

from app.models.message import MessagingEvent

ADMIN_ID = "admin-1"
USER_ID = "user-1"


def make_event(sender_id: str = USER_ID, **fields: Any) -> MessagingEvent:
    """Arma un evento de mensajería con los campos dados (message, postback, ...)."""
    data: Dict[str, Any] = {
        "sender": {"id": sender_id},
        "recipient": {"id": "page-1"},
        "timestamp": 1700000000000,
    }
    data.update(fields)
    return MessagingEvent.model_validate(data)


def text_event(text: str, sender_id: str = USER_ID) -> MessagingEvent:
    return make_event(sender_id, message={"mid": "m.1", "text": text})


def quick_reply_event(payload: str, sender_id: str = USER_ID) -> MessagingEvent:
    return make_event(sender_id, message={"mid": "m.2", "text": payload, "quick_reply": {"payload": payload}})


def sent_messages(messenger: MagicMock):
    """Payloads enviados a la Send API, en orden."""
    return [call.args[0].to_payload() for call in messenger.send.await_args_list]
