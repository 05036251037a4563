"""
Módulo de gestión de conversaciones del bot de Messenger.
"""

# Importación principal para el webhook
from .conversation_manager import ConversationManager

# Componentes internos (para testing o uso avanzado)
from .bot_state import BotState
from .content_store import ContentStore
from .session_store import SessionStore, SenderSession, ConversationState
from .keyword_engine import KeywordEngine
from .message_router import MessageRouter
from .free_text_handler import FreeTextHandler
from .profile_resolver import ProfileResolver

__all__ = [
    # Clase principal - usada por el webhook
    "ConversationManager",

    # Componentes internos - para testing/debugging
    "BotState",
    "ContentStore",
    "SessionStore",
    "SenderSession",
    "ConversationState",
    "KeywordEngine",
    "MessageRouter",
    "FreeTextHandler",
    "ProfileResolver",
]
