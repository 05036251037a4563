import logging
from typing import Iterable, List, Set
from app.models.outbound import Reply
from app.services.conversation.content_store import ContentStore
from app.services.conversation.session_store import SenderSession, ConversationState
from app.shared.messenger import create_text, create_quick_replies
from .validators import AddKeywordValidators

logger = logging.getLogger(__name__)

BRANCH_PROMPT_TEMPLATE = "ADDKEYWORD_STEP2.json"
MAX_EXTRA_BUTTONS = 3


class AddKeywordSteps:
    """
    Responsabilidad única: Lógica de cada paso del flujo de agregar keyword.
    Coordina validaciones, persistencia y la progresión entre pasos.
    Las guardas de estado viven en AddKeywordFlow; aquí se asume el estado correcto.
    """

    def __init__(self, content: ContentStore):
        self.content = content
        # Keywords atendidas antes que las reglas personalizadas (comandos, datos externos)
        self.reserved: Set[str] = set()

    def reserve(self, keywords: Iterable[str]):
        self.reserved.update(ContentStore.normalize(keyword) for keyword in keywords)

    @staticmethod
    def _text(session: SenderSession, text: str) -> List[Reply]:
        return [Reply(recipient_id=session.sender_id, message=create_text(text))]

    def prompt_keyword_name(self, session: SenderSession) -> List[Reply]:
        """Inicia el flujo pidiendo el nombre de la keyword."""
        session.reset_flow()
        session.state = ConversationState.AWAITING_KEYWORD_NAME
        return self._text(
            session,
            "Las keywords activan acciones del bot. Puedes escribirlas o pueden llegar desde un enlace. "
            "Una keyword puede tener letras, números y espacios. Por favor escribe la keyword:"
        )

    def capture_keyword_name(self, session: SenderSession, message: str) -> List[Reply]:
        """
        Guarda la keyword pendiente y ofrece de inmediato elegir el tipo de respuesta.
        La sesión sigue en AWAITING_KEYWORD_NAME; el siguiente comando decide la rama.
        """
        is_valid, error_msg, keyword = AddKeywordValidators.validate_keyword(message)
        if not is_valid:
            return self._text(session, f"❌ {error_msg}\n\nPor favor escribe la keyword:")

        if self.content.has_builtin(keyword) or keyword in self.reserved:
            logger.info(f"Keyword integrada o reservada no se puede redefinir: {keyword}")
            return self._text(session, f"❌ La keyword {keyword} ya existe. Por favor escribe otra:")

        session.pending_keyword = keyword
        logger.info(f"Keyword pendiente para {session.sender_id}: {keyword}")

        prompt = self.content.template(BRANCH_PROMPT_TEMPLATE) or create_quick_replies(
            "¿La respuesta será texto o botones?",
            [("Texto", "addkeyword_text"), ("Botones", "addkeyword_button")]
        )
        return [Reply(recipient_id=session.sender_id, message=prompt)]

    def prompt_rule_text(self, session: SenderSession) -> List[Reply]:
        session.state = ConversationState.AWAITING_KEYWORD_TEXT
        return self._text(session, "Escribe el texto que se enviará cuando alguien use esta keyword.")

    def save_text_rule(self, session: SenderSession, message: str) -> List[Reply]:
        """
        Persiste la regla de texto. Si la escritura falla, la sesión se queda en
        AWAITING_KEYWORD_TEXT sin responder, para que el usuario pueda reintentar.
        """
        is_valid, error_msg, text = AddKeywordValidators.validate_rule_text(message)
        if not is_valid:
            return self._text(session, f"❌ {error_msg}")

        keyword = session.pending_keyword
        try:
            self.content.add_custom_rule(keyword, text)
        except OSError as e:
            logger.error(f"No se pudo guardar la regla {keyword}: {e}")
            return []

        session.reset_flow()
        return self._text(session, f"✅ Keyword {keyword} agregada. ¡Pruébala!")

    def prompt_button_title(self, session: SenderSession) -> List[Reply]:
        session.state = ConversationState.AWAITING_BUTTON_TITLE
        return self._text(session, "Por favor escribe el título del botón.")

    def capture_button_title(self, session: SenderSession, message: str) -> List[Reply]:
        """Guarda el título y pregunta cuántos botones adicionales agregar (1 a 3)."""
        is_valid, error_msg, title = AddKeywordValidators.validate_button_title(message)
        if not is_valid:
            return self._text(session, f"❌ {error_msg}")

        session.pending_button_title = title
        session.state = ConversationState.AWAITING_BUTTON_COUNT

        options = [
            (f"{count} botón" if count == 1 else f"{count} botones", f"addkeyword_button{count}")
            for count in range(1, MAX_EXTRA_BUTTONS + 1)
        ]
        prompt = create_quick_replies("¿Cuántos botones adicionales quieres agregar?", options)
        return [Reply(recipient_id=session.sender_id, message=prompt)]

    def capture_button_count(self, session: SenderSession, count) -> List[Reply]:
        """
        Registra la cantidad de botones. Como las reglas solo se persisten como texto,
        la rama de botones termina pidiendo el texto de la regla.
        """
        is_valid, _, count = AddKeywordValidators.validate_button_count(str(count).strip())
        if not is_valid:
            return self._text(session, f"❌ Elige un número entre 1 y {MAX_EXTRA_BUTTONS}.")

        session.pending_button_count = count
        session.state = ConversationState.AWAITING_KEYWORD_TEXT
        logger.info(f"Botones para {session.pending_keyword}: '{session.pending_button_title}' + {count}")

        return self._text(
            session,
            f"Por ahora las keywords responden solo con texto. "
            f"Escribe el texto que acompañará al botón \"{session.pending_button_title}\":"
        )
