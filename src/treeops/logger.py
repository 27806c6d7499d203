"""Structured logging setup using structlog."""

from __future__ import annotations

import logging
import sys

import structlog

from .config import LOG_LEVEL


def setup_logging(level: str = LOG_LEVEL) -> structlog.stdlib.BoundLogger:
    """Configure structlog with console output on stderr.

    treeops never calls this itself; applications embedding it opt in.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), stream=sys.stderr, format="%(message)s")
    logging.getLogger("treeops").setLevel(getattr(logging, level.upper(), logging.INFO))

    return structlog.get_logger("treeops")


# Backed by the stdlib "treeops" logger so host applications control the level.
logger: structlog.stdlib.BoundLogger = structlog.wrap_logger(
    logging.getLogger("treeops"),
    wrapper_class=structlog.stdlib.BoundLogger,
)
