import app.logging_config
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from app.api.v1.webhook import router as webhook_router
from app.core.config import get_settings
from app.services.conversation import BotState, ContentStore, ConversationManager
from app.services.external import ExternalApis
from app.services.messenger import MessengerClient

logger = logging.getLogger(__name__)


def create_app(settings=None, conversation_manager: ConversationManager = None) -> FastAPI:
    """
    Arma la aplicación. Falla rápido con ConfigurationError si faltan secretos.

    Args:
        settings: Configuración; por defecto get_settings()
        conversation_manager: Gestor ya construido (útil en pruebas)
    """
    settings = (settings or get_settings()).validate()

    if conversation_manager is None:
        content = ContentStore.load(settings.CONTENT_DIR, settings.CUSTOM_RULES_DIR)
        conversation_manager = ConversationManager(
            state=BotState(content=content),
            apis=ExternalApis(),
            messenger=MessengerClient(settings),
            settings=settings
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"[STARTUP] Bot escuchando; Graph API {settings.GRAPH_API_VERSION}")
        yield
        await conversation_manager.close()

    app = FastAPI(title="Messenger Keyword Bot", lifespan=lifespan)
    app.state.settings = settings
    app.state.conversation_manager = conversation_manager

    app.include_router(webhook_router)

    @app.get("/")
    async def root():
        return {"message": "Messenger Keyword Bot"}

    return app


app = create_app()
