import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

logger = logging.getLogger(__name__)

UNKNOWN_NAME = "undefined"


class ConversationState(str, Enum):
    """Estados del flujo de autoría de keywords."""
    IDLE = "idle"
    AWAITING_KEYWORD_NAME = "awaiting_keyword_name"
    AWAITING_KEYWORD_TEXT = "awaiting_keyword_text"
    AWAITING_BUTTON_TITLE = "awaiting_button_title"
    AWAITING_BUTTON_COUNT = "awaiting_button_count"


@dataclass
class Profile:
    first_name: str = UNKNOWN_NAME
    last_name: str = UNKNOWN_NAME

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass
class SenderSession:
    """Estado de conversación en memoria de un remitente."""
    sender_id: str
    profile: Optional[Profile] = None
    state: ConversationState = ConversationState.IDLE
    pending_keyword: Optional[str] = None
    pending_button_title: Optional[str] = None
    pending_button_count: Optional[int] = None
    last_keyword_sent: Optional[str] = None

    @property
    def is_idle(self) -> bool:
        return self.state is ConversationState.IDLE

    def reset_flow(self):
        """Vuelve a IDLE y descarta todo lo que el flujo tenía pendiente."""
        self.state = ConversationState.IDLE
        self.pending_keyword = None
        self.pending_button_title = None
        self.pending_button_count = None


class SessionStore:
    """
    Responsabilidad única: guardar las sesiones por remitente.
    Las sesiones viven lo que vive el proceso; nunca se eliminan.
    """

    def __init__(self):
        self._sessions: Dict[str, SenderSession] = {}

    def get(self, sender_id: str) -> Optional[SenderSession]:
        return self._sessions.get(sender_id)

    def get_or_create(self, sender_id: str) -> SenderSession:
        session = self._sessions.get(sender_id)
        if session is None:
            session = SenderSession(sender_id=sender_id)
            self._sessions[sender_id] = session
            logger.debug(f"[SESSIONS] Sesión creada para {sender_id}")
        return session

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, sender_id: str) -> bool:
        return sender_id in self._sessions
