"""Pruebas de la configuración de logs."""

import logging
import logging.handlers
import os

import pytest

from app.core.config import Settings
from app.logging_config import configure_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_configure_logging_writes_to_rotating_file(tmp_path, restore_root_logger):
    log_file = configure_logging("WARNING", tmp_path / "logs")

    assert log_file == tmp_path / "logs" / "bot.log"
    assert restore_root_logger.level == logging.WARNING
    assert any(isinstance(h, logging.handlers.TimedRotatingFileHandler) for h in restore_root_logger.handlers)

    logging.getLogger("app.test").warning("[TEST] línea de prueba")
    for handler in restore_root_logger.handlers:
        handler.flush()
    assert "[TEST] línea de prueba" in log_file.read_text(encoding="utf-8")


def test_httpx_requests_are_not_logged_below_warning(tmp_path, restore_root_logger):
    configure_logging("DEBUG", tmp_path)

    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("httpcore").level == logging.WARNING


def test_log_level_comes_from_environment():
    assert Settings().LOG_LEVEL == os.environ["LOG_LEVEL"].upper()
