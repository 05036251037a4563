from abc import ABC, abstractmethod
from typing import List
import logging

from app.models.outbound import Reply
from app.services.conversation.session_store import SenderSession, ConversationState
from app.shared.messenger import create_text


class BaseFlow(ABC):
    """
    Clase base para todos los flujos de conversación.

    Responsabilidad: Definir interfaz común y utilidades compartidas.
    Todos los flujos específicos deben heredar de esta clase.
    """

    STATE_MACHINE_ERROR_TEXT = "Lo siento, el bot se confundió. Tendremos que empezar de nuevo."

    def __init__(self):
        """Inicialización base. Los flujos hijos pueden sobrescribir."""
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    async def handle_text(self, session: SenderSession, message: str) -> List[Reply]:
        """
        Procesa texto libre mientras la sesión está dentro del flujo.

        Args:
            session: Sesión del remitente (se muta en sitio)
            message: Texto del usuario

        Returns:
            List[Reply]: Respuestas para el usuario (puede ser vacía)
        """
        pass

    def log_step(self, step: str, sender_id: str, message: str = ""):
        """Utilidad para logging consistente entre flujos."""
        flow_name = self.__class__.__name__.replace('Flow', '').upper()
        self.logger.info(f"[{flow_name}] Paso '{step}' - Remitente: {sender_id}")
        if message:
            self.logger.debug(f"[{flow_name}] Mensaje: '{message}'")

    def in_state(self, session: SenderSession, expected: ConversationState) -> bool:
        """Indica si la sesión está en el estado que el paso espera como predecesor."""
        if session.state is expected:
            return True
        self.logger.warning(
            f"Transición inválida para {session.sender_id}: se esperaba {expected.value}, estado actual {session.state.value}"
        )
        return False

    def state_machine_error(self, session: SenderSession) -> List[Reply]:
        """
        Única vía de recuperación ante un paso invocado fuera de orden:
        se disculpa, vuelve a IDLE y descarta lo pendiente.
        """
        session.reset_flow()
        return [self.text_reply(session, self.STATE_MACHINE_ERROR_TEXT)]

    @staticmethod
    def text_reply(session: SenderSession, text: str) -> Reply:
        """Utilidad para respuestas de texto al remitente de la sesión."""
        return Reply(recipient_id=session.sender_id, message=create_text(text))
