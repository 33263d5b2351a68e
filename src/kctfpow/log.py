"""
Structured logging for kctfpow.

Library loggers are structlog loggers wrapped around the stdlib logger of
the same name, so until an application opts in, stdlib logging's default
WARNING threshold keeps debug and info events silent. Nothing is
configured at import time; configure_logging() picks a level and a
renderer for the "kctfpow" logger tree.
"""

import logging
import sys
from typing import Union

import structlog

ROOT_LOGGER = "kctfpow"


def get_logger(name: str):
    """Return a structlog logger backed by the stdlib logger for name."""
    return structlog.wrap_logger(
        logging.getLogger(name),
        wrapper_class=structlog.stdlib.BoundLogger,
    )


def configure_logging(level: Union[int, str] = logging.WARNING, json: bool = False) -> None:
    """
    Send kctfpow events to stdout at the given level.

    Args:
        level: Minimum level, as a logging constant or its name
        json: Render events as JSON lines instead of console text
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {level}")

    renderer = structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger(ROOT_LOGGER)
    for old in list(logger.handlers):
        logger.removeHandler(old)
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
