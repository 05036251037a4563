"""Fixtures compartidos por las pruebas del bot."""

import os

# La configuración se lee al importar app.core.config; los valores deben existir antes
os.environ.setdefault("APP_SECRET", "test-app-secret")
os.environ.setdefault("VALIDATION_TOKEN", "test-validation-token")
os.environ.setdefault("PAGE_ACCESS_TOKEN", "test-page-token")
os.environ.setdefault("ADMIN_SENDER_ID", "admin-1")
os.environ.setdefault("NEWS_API_URL", "https://news.example.test/feed")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import shutil
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.core.config import APP_DIR, get_settings
from app.models.message import UserProfile
from app.services.conversation import BotState, ContentStore, ConversationManager
from app.services.messenger import MessengerClient
from tests.helpers import USER_ID


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    """Copia del contenido real del bot, sin reglas personalizadas."""
    target = tmp_path / "content"
    shutil.copytree(APP_DIR / "content", target, ignore=shutil.ignore_patterns("custom"))
    return target


@pytest.fixture
def custom_dir(tmp_path: Path) -> Path:
    return tmp_path / "custom"


@pytest.fixture
def content_store(content_dir: Path, custom_dir: Path) -> ContentStore:
    return ContentStore.load(content_dir, custom_dir)


@pytest.fixture
def bot_state(content_store: ContentStore) -> BotState:
    return BotState(content=content_store)


@pytest.fixture
def apis() -> MagicMock:
    """Clientes externos simulados; cada prueba ajusta los retornos que necesita."""
    apis = MagicMock()
    apis.profiles.get_user_profile = AsyncMock(
        return_value=UserProfile(first_name="Ana", last_name="Pérez")
    )
    apis.covid.get_region_summary = AsyncMock()
    apis.covid.get_countries = AsyncMock()
    apis.news.get_headlines = AsyncMock()
    apis.close = AsyncMock()
    return apis


@pytest.fixture
def messenger() -> MagicMock:
    messenger = MagicMock(spec=MessengerClient)
    messenger.send = AsyncMock(return_value={"recipient_id": USER_ID, "message_id": "mid.1"})
    messenger.set_persistent_menu = AsyncMock()
    messenger.remove_persistent_menu = AsyncMock()
    return messenger


@pytest.fixture
def manager(bot_state, apis, messenger, settings) -> ConversationManager:
    return ConversationManager(bot_state, apis, messenger, settings)
