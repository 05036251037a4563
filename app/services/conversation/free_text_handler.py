import logging
import random
from typing import List, Optional
from app.models.outbound import Reply
from app.services.conversation.content_store import ContentStore
from app.services.conversation.flows.add_keyword import AddKeywordFlow
from app.services.conversation.keyword_engine import KeywordEngine
from app.services.conversation.session_store import SenderSession
from app.shared.messenger import create_text

logger = logging.getLogger(__name__)

# Keyword integrada tras la cual el siguiente texto se reenvía al administrador
RELAY_KEYWORD = "SEND A MESSAGE"


class FreeTextHandler:
    """
    Responsabilidad única: decidir qué hacer con texto escrito que no es un comando del sistema.

    Orden:
        1. Reenvío al administrador si la última keyword fue "send a message"
        2. Paso del flujo activo
        3. Emoji -> emoji aleatorio
        4. Motor de keywords
    """

    def __init__(self, content: ContentStore, engine: KeywordEngine, flow: AddKeywordFlow, admin_sender_id: str):
        self.content = content
        self.engine = engine
        self.flow = flow
        self.admin_sender_id = admin_sender_id

    async def handle(self, session: SenderSession, text: str) -> List[Reply]:
        if session.last_keyword_sent == RELAY_KEYWORD:
            return self._relay_to_admin(session, text)

        if not session.is_idle:
            return await self.flow.handle_text(session, text)

        emoji = self._random_emoji(text)
        if emoji:
            return [Reply(recipient_id=session.sender_id, message=create_text(emoji))]

        action = await self.engine.resolve(session, text)
        return action.replies

    def _relay_to_admin(self, session: SenderSession, text: str) -> List[Reply]:
        """Reenvía el texto tal cual; el atajo se consume con un solo mensaje."""
        session.last_keyword_sent = None
        logger.info(f"[RELAY] Mensaje de {session.sender_id} reenviado al administrador")
        return [
            Reply(recipient_id=self.admin_sender_id, message=create_text(text)),
            Reply(recipient_id=session.sender_id, message=create_text("¡Gracias! Tu mensaje fue enviado.")),
        ]

    def _random_emoji(self, text: str) -> Optional[str]:
        """Si el texto empieza con un emoji conocido, devuelve uno al azar de la tabla."""
        if not self.content.emoji:
            return None
        table = set(self.content.emoji)
        if text[:2] in table or text[:1] in table:
            return random.choice(self.content.emoji)
        return None
