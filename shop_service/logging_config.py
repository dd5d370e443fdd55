# shop_service/logging_config.py

"""
Logging setup for the shop service.

Modules obtain their logger with ``logging.getLogger(__name__)``; this module
only attaches a handler and sets the level once, at application creation.
"""

from __future__ import annotations

import logging
from typing import Union

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
ROOT_LOGGER_NAME = "shop_service"

_configured = False


def _parse_level(value: Union[str, int, None]) -> int:
    """Map 'DEBUG' / 'info' / 10 to a logging constant; unknown values give INFO."""
    if isinstance(value, int):
        return value
    if not value:
        return logging.INFO
    level = logging.getLevelName(value.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: Union[str, int, None] = None, *, force: bool = False) -> logging.Logger:
    global _configured

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(_parse_level(level))

    if _configured and not force:
        return logger

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)

    _configured = True
    return logger


