from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional


class SenderAction(str, Enum):
    """Acciones de remitente soportadas por la Send API."""
    TYPING_ON = "typing_on"
    TYPING_OFF = "typing_off"
    MARK_SEEN = "mark_seen"


@dataclass
class Reply:
    """
    Mensaje saliente ya compuesto, listo para la Send API.
    Lleva exactamente uno de `message` o `sender_action`.
    """
    recipient_id: str
    message: Optional[Dict[str, Any]] = None
    sender_action: Optional[SenderAction] = None

    def __post_init__(self):
        if (self.message is None) == (self.sender_action is None):
            raise ValueError("Un Reply debe llevar message o sender_action, no ambos")

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"recipient": {"id": self.recipient_id}}
        if self.message is not None:
            payload["message"] = self.message
        else:
            payload["sender_action"] = self.sender_action.value
        return payload


class ReplySource(Enum):
    """Qué eslabón de la cadena de precedencia resolvió la keyword."""
    COMMAND = auto()
    CONTENT = auto()
    CUSTOM = auto()
    EXTERNAL = auto()
    UNKNOWN = auto()


@dataclass
class ReplyAction:
    keyword: str
    source: ReplySource
    replies: List[Reply] = field(default_factory=list)
