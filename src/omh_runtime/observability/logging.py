from __future__ import annotations

import logging
import sys
from typing import Optional

from omh_runtime.settings import get_settings

PACKAGE_LOGGER = "omh_runtime"


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Send log records to stdout and set the package log level.

    The root handler is only installed when nothing else configured logging
    first (for example uvicorn or pytest). The ``omh_runtime`` logger level
    is always applied so ``LOG_LEVEL`` still takes effect under a host.
    """
    settings = get_settings()
    log_level = (level or settings.log_level).upper()
    logging.basicConfig(
        level=log_level,
        format=settings.log_format,
        stream=sys.stdout,
    )
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(log_level)
    return package_logger
