#!/usr/bin/env python3
"""
Logging setup for Collectory.

Modules log through `logging.getLogger(__name__)`; this installs a single
stream handler on the package logger using the `logging` config block.
"""

import logging
from typing import Any, Dict, Optional

PACKAGE_LOGGER = "collectory"

_HANDLER_NAME = "collectory-stream"


def configure_logging(config: Optional[Dict[str, Any]] = None) -> logging.Logger:
    """
    Configure the package logger from `config["logging"]` (level, format).

    Safe to call repeatedly: the handler is installed once and updated after.
    Unknown level names fall back to WARNING.
    """
    settings = (config or {}).get("logging", {}) or {}
    level_name = str(settings.get("level", "WARNING")).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.WARNING

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    handler = next((h for h in logger.handlers if h.get_name() == _HANDLER_NAME), None)
    if handler is None:
        handler = logging.StreamHandler()
        handler.set_name(_HANDLER_NAME)
        logger.addHandler(handler)
    fmt = settings.get("format") or "%(asctime)s %(levelname)s %(name)s: %(message)s"
    handler.setFormatter(logging.Formatter(fmt))
    return logger
