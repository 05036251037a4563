import logging
from typing import Awaitable, Callable, Dict, List
from app.models.message import MessagingEvent, Message
from app.models.outbound import Reply, SenderAction
from app.services.messenger import MessengerClient, MessengerAPIError
from app.services.conversation.bot_state import BotState
from app.services.conversation.free_text_handler import FreeTextHandler
from app.services.conversation.keyword_engine import KeywordEngine
from app.services.conversation.session_store import SenderSession, Profile
from app.shared.messenger import (
    MessengerButtons, MessengerQuickReplies, MessengerTemplates, create_text
)

logger = logging.getLogger(__name__)

# Contenido de demostración de los comandos del sistema
DEMO_MEDIA = {
    "image": ("image", "http://messengerdemo.parseapp.com/img/rift.png"),
    "gif": ("image", "http://messengerdemo.parseapp.com/img/instagram_logo.gif"),
    "audio": ("audio", "http://messengerdemo.parseapp.com/audio/sample.mp3"),
    "video": ("video", "http://messengerdemo.parseapp.com/video/allofus480.mov"),
    "file": ("file", "http://messengerdemo.parseapp.com/files/test.txt"),
}

GET_STARTED_PAYLOAD = "GET_STARTED_PAYLOAD"
PERSISTENT_MENU = {
    "locale": "default",
    "composer_input_disabled": False,
    "call_to_actions": [
        {"type": "postback", "title": "COVID-19", "payload": "HOME"},
        {"type": "postback", "title": "Noticias", "payload": "NEWS"},
        {"type": "postback", "title": "Sobre mí", "payload": "ABOUT_ME"},
    ],
}

SystemCommand = Callable[[SenderSession], Awaitable[List[Reply]]]


class MessageRouter:
    """
    Responsabilidad única: clasificar cada evento entrante y despacharlo.

    Nunca lanza excepciones hacia afuera: cualquier error inesperado termina
    en la respuesta de keyword desconocida.
    """

    def __init__(self, state: BotState, engine: KeywordEngine, free_text: FreeTextHandler, messenger: MessengerClient, admin_sender_id: str):
        self.state = state
        self.engine = engine
        self.free_text = free_text
        self.messenger = messenger
        self.admin_sender_id = admin_sender_id

        self.system_commands: Dict[str, SystemCommand] = {
            "image": self._media("image"),
            "gif": self._media("gif"),
            "audio": self._media("audio"),
            "video": self._media("video"),
            "file": self._media("file"),
            "button": self._button_template,
            "generic": self._generic_template,
            "quick reply": self._quick_reply,
            "read receipt": self._sender_action(SenderAction.MARK_SEEN),
            "typing on": self._sender_action(SenderAction.TYPING_ON),
            "typing off": self._sender_action(SenderAction.TYPING_OFF),
            "user info": self._user_info,
            "add menu": self._add_menu,
            "remove menu": self._remove_menu,
            "stop": self._stop,
            "start": self._start,
        }

    async def route(self, event: MessagingEvent, session: SenderSession) -> List[Reply]:
        """
        Clasifica el evento y devuelve las respuestas a enviar (puede ser vacía).

        Args:
            event: Evento de mensajería ya validado
            session: Sesión del remitente

        Returns:
            List[Reply]: Respuestas en el orden en que deben enviarse
        """
        try:
            return await self._route(event, session)
        except Exception as e:
            logger.error(f"[ROUTER] Error procesando evento de {session.sender_id}: {e}", exc_info=True)
            return self.engine.unknown(session, "").replies

    async def _route(self, event: MessagingEvent, session: SenderSession) -> List[Reply]:
        if event.message is not None:
            return await self._route_message(event.message, session)

        if event.postback is not None:
            if self.state.stopped:
                return []
            logger.info(f"[ROUTER] Postback de {session.sender_id}: {event.postback.payload}")
            action = await self.engine.resolve(session, event.postback.payload or "")
            return action.replies

        if event.optin is not None:
            if self.state.stopped:
                return []
            logger.info(f"[ROUTER] Autenticación de {session.sender_id} con ref '{event.optin.ref}'")
            return [Reply(recipient_id=session.sender_id, message=create_text("Autenticación exitosa"))]

        if event.delivery is not None:
            for mid in event.delivery.mids:
                logger.debug(f"[ROUTER] Mensaje {mid} entregado")
            logger.debug(f"[ROUTER] Entregados todos los mensajes antes de {event.delivery.watermark}")
            return []

        if event.read is not None:
            logger.debug(f"[ROUTER] {session.sender_id} leyó hasta {event.read.watermark}")
            return []

        logger.warning(f"[ROUTER] Evento desconocido de {session.sender_id}")
        return []

    async def _route_message(self, message: Message, session: SenderSession) -> List[Reply]:
        if message.is_echo:
            logger.debug(f"[ROUTER] Eco del mensaje {message.mid} (app {message.app_id}, metadata {message.metadata})")
            return []

        if message.quick_reply is not None:
            action = await self.engine.resolve(session, message.quick_reply.payload)
            return action.replies

        if message.text:
            # El único texto que se escucha con el bot detenido es "start"
            if self.state.stopped and message.text != "start":
                return []

            logger.info(f"[ROUTER] Texto de {session.sender_id}: {message.text}")
            command = self.system_commands.get(message.text.lower())
            if command is not None:
                return await command(session)
            return await self.free_text.handle(session, message.text)

        if message.attachments:
            payload = message.attachments[0].payload
            if payload is not None and payload.url:
                action = await self.engine.resolve(session, payload.url)
                return action.replies

        return []

    # ==================== COMANDOS DEL SISTEMA ====================

    def _media(self, name: str) -> SystemCommand:
        attachment_type, url = DEMO_MEDIA[name]

        async def send_media(session: SenderSession) -> List[Reply]:
            message = MessengerTemplates.create_attachment(attachment_type, url)
            return [Reply(recipient_id=session.sender_id, message=message)]

        return send_media

    @staticmethod
    def _sender_action(action: SenderAction) -> SystemCommand:
        async def send_action(session: SenderSession) -> List[Reply]:
            return [Reply(recipient_id=session.sender_id, sender_action=action)]

        return send_action

    async def _button_template(self, session: SenderSession) -> List[Reply]:
        message = MessengerButtons.create_button_template("Esto es un texto de prueba", [
            MessengerButtons.web_url("Abrir URL", "https://www.oculus.com/en-us/rift/"),
            MessengerButtons.postback("Lanzar postback", "DEVELOPER_DEFINED_PAYLOAD"),
            MessengerButtons.phone_number("Llamar", "+16505551234"),
        ])
        return [Reply(recipient_id=session.sender_id, message=message)]

    async def _generic_template(self, session: SenderSession) -> List[Reply]:
        element = MessengerTemplates.create_element(
            title="COVID-19",
            subtitle="Estadísticas de la pandemia",
            image_url="https://raw.githubusercontent.com/danh9a99/chat-bot-news/master/img/corona_1.jpg",
            item_url="https://moh.gov.vn/",
            buttons=[
                MessengerButtons.postback("Vietnam", "VN"),
                MessengerButtons.postback("Mundo", "GB"),
                MessengerButtons.postback("Top 10", "CONTACT"),
            ]
        )
        message = MessengerTemplates.create_generic_template([element])
        return [Reply(recipient_id=session.sender_id, message=message)]

    async def _quick_reply(self, session: SenderSession) -> List[Reply]:
        message = MessengerQuickReplies.create_quick_replies("Algunos botones y una prueba de ubicación", [
            MessengerQuickReplies.text_option("Acción", "DEVELOPER_DEFINED_PAYLOAD_FOR_PICKING_ACTION"),
            MessengerQuickReplies.text_option("Otra cosa", "DEVELOPER_DEFINED_PAYLOAD_FOR_PICKING_SOMETHING"),
            MessengerQuickReplies.location_option(),
        ])
        return [Reply(recipient_id=session.sender_id, message=message)]

    async def _user_info(self, session: SenderSession) -> List[Reply]:
        profile = session.profile or Profile()
        return [Reply(recipient_id=session.sender_id, message=create_text(profile.first_name))]

    async def _add_menu(self, session: SenderSession) -> List[Reply]:
        try:
            await self.messenger.set_persistent_menu(GET_STARTED_PAYLOAD, PERSISTENT_MENU)
        except MessengerAPIError as e:
            logger.error(f"[ROUTER] No se pudo agregar el menú persistente: {e}")
        return []

    async def _remove_menu(self, session: SenderSession) -> List[Reply]:
        try:
            await self.messenger.remove_persistent_menu()
        except MessengerAPIError as e:
            logger.error(f"[ROUTER] No se pudo eliminar el menú persistente: {e}")
        return []

    async def _stop(self, session: SenderSession) -> List[Reply]:
        if self._is_admin(session):
            self.state.stop()
        return []

    async def _start(self, session: SenderSession) -> List[Reply]:
        if self._is_admin(session):
            self.state.start()
        return []

    def _is_admin(self, session: SenderSession) -> bool:
        if session.sender_id == self.admin_sender_id:
            return True
        logger.warning(f"[ROUTER] {session.sender_id} intentó un comando de administrador")
        return False
