"""Debug-gated logging setup."""
from __future__ import annotations

import logging
from pathlib import Path

import pytest

from floss_funding.core.config.config_service import ConfigService
from floss_funding.core.logging.debug_logger import PACKAGE_LOGGER, configure_debug_logging


@pytest.fixture
def package_logger():
    logger = logging.getLogger(PACKAGE_LOGGER)
    handlers, level = list(logger.handlers), logger.level
    yield logger
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)


def _debug_handlers(logger: logging.Logger) -> list:
    return [h for h in logger.handlers if getattr(h, "_floss_funding_debug", False)]


def test_quiet_by_default(package_logger: logging.Logger, tmp_path: Path) -> None:
    configure_debug_logging(ConfigService(environ={"XDG_CONFIG_HOME": str(tmp_path)}))
    assert _debug_handlers(package_logger) == []
    assert any(isinstance(h, logging.NullHandler) for h in package_logger.handlers)


def test_debug_writes_to_logfile_once(package_logger: logging.Logger, tmp_path: Path) -> None:
    logfile = tmp_path / "ff.log"
    cfg = ConfigService(
        environ={
            "XDG_CONFIG_HOME": str(tmp_path),
            "FLOSS_CFG_FUNDING_DEBUG": "1",
            "FLOSS_CFG_FUNDING_LOGFILE": str(logfile),
        }
    )
    configure_debug_logging(cfg)
    configure_debug_logging(cfg)

    handlers = _debug_handlers(package_logger)
    assert len(handlers) == 1
    logging.getLogger("floss_funding.nagging").debug("hello lockfile")
    handlers[0].flush()
    assert "hello lockfile" in logfile.read_text(encoding="utf-8")
