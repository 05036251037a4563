from functools import lru_cache
from pathlib import Path
from dotenv import load_dotenv
import os

load_dotenv(Path(__file__).resolve().parents[2] / ".env")

APP_DIR = Path(__file__).resolve().parents[1]


class ConfigurationError(Exception):
    """Falta configuración obligatoria para arrancar el bot."""


class Settings:
    # Secretos obligatorios de la app de Messenger
    APP_SECRET: str = os.getenv("APP_SECRET")
    VALIDATION_TOKEN: str = os.getenv("VALIDATION_TOKEN")
    PAGE_ACCESS_TOKEN: str = os.getenv("PAGE_ACCESS_TOKEN")

    # Graph API
    GRAPH_API_VERSION: str = os.getenv("GRAPH_API_VERSION", "v19.0")
    GRAPH_BASE_URL: str = f"https://graph.facebook.com/{GRAPH_API_VERSION}"

    # Administrador: único remitente autorizado para stop/start y destino de "send a message"
    ADMIN_SENDER_ID: str = os.getenv("ADMIN_SENDER_ID", "1073962542672604")

    # Contenido estático y reglas personalizadas
    CONTENT_DIR: Path = Path(os.getenv("CONTENT_DIR", str(APP_DIR / "content")))
    CUSTOM_RULES_DIR: Path = Path(os.getenv("CUSTOM_RULES_DIR", str(APP_DIR / "content" / "custom")))

    # Llamadas salientes
    HTTP_TIMEOUT: float = float(os.getenv("HTTP_TIMEOUT", "5.0"))

    # Fuentes de datos externas
    COVID_API_URL: str = os.getenv("COVID_API_URL", "https://code.junookyo.xyz/api/ncov-moh/data.json")
    COVID_SUMMARY_URL: str = os.getenv("COVID_SUMMARY_URL", "https://api.covid19api.com/summary")
    NEWS_API_URL: str = os.getenv("NEWS_API_URL", "")

    # Logs: nivel y carpeta de los archivos con rotación diaria
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    LOGS_DIR: Path = Path(os.getenv("LOGS_DIR", str(APP_DIR.parent / "logs")))

    REQUIRED = ("APP_SECRET", "VALIDATION_TOKEN", "PAGE_ACCESS_TOKEN")

    def validate(self) -> "Settings":
        """Falla rápido si falta alguno de los secretos obligatorios."""
        missing = [name for name in self.REQUIRED if not getattr(self, name)]
        if missing:
            raise ConfigurationError(f"Faltan valores de configuración: {', '.join(missing)}")
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
