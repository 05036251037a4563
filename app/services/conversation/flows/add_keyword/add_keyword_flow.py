import logging
from typing import Iterable, List
from app.models.outbound import Reply
from app.services.conversation.content_store import ContentStore
from app.services.conversation.flows.base_flow import BaseFlow
from app.services.conversation.session_store import SenderSession, ConversationState
from .add_keyword_steps import AddKeywordSteps

logger = logging.getLogger(__name__)


class AddKeywordFlow(BaseFlow):
    """
    Responsabilidad única: Orquestar el flujo de agregar keyword.

    Cada entrada valida el estado predecesor antes de delegar en AddKeywordSteps;
    cualquier estado inesperado termina en state_machine_error.

        IDLE --add keyword--> AWAITING_KEYWORD_NAME --texto--> (pending_keyword)
            --addkeyword_text--> AWAITING_KEYWORD_TEXT --texto--> IDLE
            --addkeyword_button--> AWAITING_BUTTON_TITLE --texto--> AWAITING_BUTTON_COUNT
                --addkeyword_buttonN--> AWAITING_KEYWORD_TEXT
    """

    def __init__(self, content: ContentStore):
        super().__init__()
        self.steps = AddKeywordSteps(content)

    def reserve(self, keywords: Iterable[str]):
        """Impide crear reglas con nombres que otro componente atiende primero."""
        self.steps.reserve(keywords)

    async def start(self, session: SenderSession) -> List[Reply]:
        """Comando 'add keyword': siempre reinicia el flujo desde el nombre."""
        self.log_step("start", session.sender_id)
        return self.steps.prompt_keyword_name(session)

    async def handle_text(self, session: SenderSession, message: str) -> List[Reply]:
        """Texto libre con un flujo activo: se delega al paso del estado actual."""
        self.log_step(session.state.value, session.sender_id, message)

        # Mapeo simple de estados a pasos
        step_handlers = {
            ConversationState.AWAITING_KEYWORD_NAME: self.steps.capture_keyword_name,
            ConversationState.AWAITING_KEYWORD_TEXT: self._save_text_rule,
            ConversationState.AWAITING_BUTTON_TITLE: self.steps.capture_button_title,
            ConversationState.AWAITING_BUTTON_COUNT: self.steps.capture_button_count,
        }

        handler = step_handlers.get(session.state)
        if handler is None:
            return self.state_machine_error(session)

        try:
            return handler(session, message)
        except Exception as e:
            self.logger.error(f"Error procesando mensaje: {e}", exc_info=True)
            return self.state_machine_error(session)

    def _save_text_rule(self, session: SenderSession, message: str) -> List[Reply]:
        if not session.pending_keyword:
            return self.state_machine_error(session)
        return self.steps.save_text_rule(session, message)

    def _choosing_reply_type(self, session: SenderSession) -> bool:
        return self.in_state(session, ConversationState.AWAITING_KEYWORD_NAME) and bool(session.pending_keyword)

    async def choose_text_reply(self, session: SenderSession) -> List[Reply]:
        """Comando 'addkeyword_text'."""
        self.log_step("addkeyword_text", session.sender_id)
        if not self._choosing_reply_type(session):
            return self.state_machine_error(session)
        return self.steps.prompt_rule_text(session)

    async def choose_button_reply(self, session: SenderSession) -> List[Reply]:
        """Comando 'addkeyword_button'."""
        self.log_step("addkeyword_button", session.sender_id)
        if not self._choosing_reply_type(session):
            return self.state_machine_error(session)
        return self.steps.prompt_button_title(session)

    async def choose_button_count(self, session: SenderSession, count: int) -> List[Reply]:
        """Comandos 'addkeyword_button1..3'."""
        self.log_step(f"addkeyword_button{count}", session.sender_id)
        if not self.in_state(session, ConversationState.AWAITING_BUTTON_COUNT):
            return self.state_machine_error(session)
        return self.steps.capture_button_count(session, count)
