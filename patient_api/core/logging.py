from __future__ import annotations

import logging
import sys

from loguru import logger

_LOGGING_CONFIGURED = False

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {extra[env]} | {name}:{function}:{line} - {message}"


def setup_logging(level: str = "INFO", env: str = "development") -> None:
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    level = level.upper()
    # uvicorn and sqlalchemy log through the stdlib
    logging.basicConfig(level=level)

    logger.remove()
    logger.configure(extra={"env": env})
    logger.add(
        sys.stdout,
        level=level,
        format=LOG_FORMAT,
        enqueue=True,
        diagnose=False,
        backtrace=False,
    )

    _LOGGING_CONFIGURED = True
