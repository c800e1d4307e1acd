"""
core/logging/debug_logger.py
============================

Debug-only logging for floss_funding.

The package logger stays silent (NullHandler) unless the debug switch is on,
because a library that asks for funding must not add noise to its host's
logs. With debug on, records go to stderr, or to the file named by
FLOSS_CFG_FUNDING_LOGFILE.
"""

from __future__ import annotations

import logging
from typing import Optional

from floss_funding.core.config.config_service import ConfigService, config_service

PACKAGE_LOGGER = "floss_funding"

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


def configure_debug_logging(config: Optional[ConfigService] = None) -> logging.Logger:
    """
    Attach a DEBUG handler to the package logger when debugging is enabled.

    Safe to call repeatedly; handlers are only added once.
    """
    cfg = config or config_service
    logger = logging.getLogger(PACKAGE_LOGGER)
    if not cfg.debug:
        return logger

    logger.setLevel(logging.DEBUG)
    if any(getattr(h, "_floss_funding_debug", False) for h in logger.handlers):
        return logger

    handler: logging.Handler
    if cfg.general.logfile:
        try:
            handler = logging.FileHandler(cfg.general.logfile, encoding="utf-8")
        except OSError:
            handler = logging.StreamHandler()
    else:
        handler = logging.StreamHandler()
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler._floss_funding_debug = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger
