import asyncio
import logging
from collections import defaultdict
from typing import Dict, List
from app.core.config import get_settings
from app.models.message import MessagingEvent, WebhookPayload
from app.models.outbound import Reply
from app.services.external import ExternalApis
from app.services.messenger import MessengerClient, MessengerAPIError
from app.services.conversation.bot_state import BotState
from app.services.conversation.flows import AddKeywordFlow
from app.services.conversation.free_text_handler import FreeTextHandler
from app.services.conversation.keyword_engine import KeywordEngine
from app.services.conversation.message_router import MessageRouter
from app.services.conversation.profile_resolver import ProfileResolver

logger = logging.getLogger(__name__)


class ConversationManager:
    """
    Responsabilidad única: Orquestar el procesamiento de cada evento.
    Coordina los componentes especializados y entrega las respuestas.

    Los eventos de un mismo remitente se procesan de a uno; remitentes
    distintos avanzan en paralelo.
    """

    def __init__(self, state: BotState, apis: ExternalApis, messenger: MessengerClient, settings=None):
        """
        Inicializa el gestor de conversaciones.

        Args:
            state: Estado mutable del proceso (sesiones, catálogo, kill switch)
            apis: Clientes externos (perfiles, estadísticas, noticias)
            messenger: Cliente de la Send API
            settings: Configuración; por defecto get_settings()
        """
        settings = settings or get_settings()
        self.state = state
        self.apis = apis
        self.messenger = messenger

        # Componentes especializados
        self.profiles = ProfileResolver(state.sessions, apis.profiles)
        self.add_keyword_flow = AddKeywordFlow(state.content)
        self.engine = KeywordEngine(state.content, apis, self.add_keyword_flow)
        self.free_text = FreeTextHandler(state.content, self.engine, self.add_keyword_flow, settings.ADMIN_SENDER_ID)
        self.router = MessageRouter(state, self.engine, self.free_text, messenger, settings.ADMIN_SENDER_ID)
        self.add_keyword_flow.reserve([*self.engine.commands, *self.engine.external, *self.router.system_commands])

        self._locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def process_payload(self, payload: WebhookPayload):
        """Procesa en orden todos los eventos de una entrega del webhook."""
        for event in payload.events():
            await self.process_event(event)

    async def process_event(self, event: MessagingEvent) -> List[Reply]:
        """
        Procesa un evento de punta a punta: perfil, enrutamiento y envío.

        Returns:
            List[Reply]: Respuestas que se intentaron enviar
        """
        sender_id = event.sender_id
        if not sender_id:
            logger.warning(f"[EVENTS] Evento sin id de remitente (user_ref {event.sender.user_ref}); se omite")
            return []

        async with self._locks[sender_id]:
            if self._is_conversational(event):
                await self.profiles.resolve(sender_id)
            session = self.state.sessions.get_or_create(sender_id)

            replies = await self.router.route(event, session)
            await self._deliver(replies)
        return replies

    @staticmethod
    def _is_conversational(event: MessagingEvent) -> bool:
        """Solo los mensajes y postbacks del usuario justifican consultar su perfil."""
        if event.message is not None:
            return not event.message.is_echo
        return event.postback is not None

    async def _deliver(self, replies: List[Reply]):
        """Envía las respuestas en orden; un fallo de envío solo se registra."""
        for reply in replies:
            try:
                await self.messenger.send(reply)
            except MessengerAPIError as e:
                logger.error(f"[SEND] No se pudo enviar a {reply.recipient_id}: {e}")

    async def close(self):
        """Cierra recursos del manager."""
        try:
            await self.apis.close()
            logger.debug("Recursos cerrados exitosamente")
        except Exception as e:
            logger.error(f"Error cerrando recursos: {e}")
