# app/logging_config.py
import logging
from pathlib import Path
from logging.handlers import TimedRotatingFileHandler
from app.core.config import get_settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_FILENAME = "bot.log"
LOG_RETENTION_DAYS = 30

# Registran cada request en INFO con la URL completa, incluido el access_token
QUIET_LOGGERS = ("httpx", "httpcore")


def configure_logging(level: str, logs_dir: Path) -> Path:
    """
    Configura consola y archivo con rotación diaria para todo el proceso.

    Returns:
        Path: Ruta del archivo de log activo
    """
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file = logs_dir / LOG_FILENAME

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(),
            TimedRotatingFileHandler(log_file, when="midnight", interval=1, backupCount=LOG_RETENTION_DAYS, encoding='utf-8'),
        ],
        force=True,    # sobreescribe config que ponga uvicorn
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return log_file


_settings = get_settings()
configure_logging(_settings.LOG_LEVEL, _settings.LOGS_DIR)
