import logging
from dataclasses import dataclass, field
from app.services.conversation.session_store import SessionStore
from app.services.conversation.content_store import ContentStore

logger = logging.getLogger(__name__)


@dataclass
class BotState:
    """
    Único dueño del estado mutable del proceso: sesiones, catálogo y kill switch.
    Se crea vacío al arrancar y se inyecta en los componentes que lo usan.
    """
    content: ContentStore
    sessions: SessionStore = field(default_factory=SessionStore)
    stopped: bool = False

    def stop(self):
        logger.warning("[STATE] Bot detenido por el administrador")
        self.stopped = True

    def start(self):
        logger.warning("[STATE] Bot reactivado por el administrador")
        self.stopped = False
