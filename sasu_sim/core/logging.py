"""Logging configuration for sasu_sim.

Structured logging through structlog on top of the standard library handlers.
Console output during development, JSON lines when ``json_output`` is set.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
import sys
from typing import Any

import structlog

from sasu_sim.core.settings import PROJECT_ROOT, get_settings

LOG_DIR = PROJECT_ROOT / "logs"
LOG_FILE = LOG_DIR / "sasu_sim.log"

_configured: bool = False


def _build_handlers() -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    # No log file under pytest
    if os.environ.get("PYTEST_CURRENT_TEST") or "pytest" in sys.modules:
        return handlers

    try:
        LOG_DIR.mkdir(exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                str(LOG_FILE), maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
            )
        )
    except OSError:
        # Read-only checkout: stdout only
        pass
    return handlers


def configure_logging(
    level: str | None = None,
    json_output: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure structured logging for the application.

    Args:
        level: Log level name. Defaults to ``AppSettings.log_level``.
        json_output: Render events as JSON instead of console lines.

    Returns:
        Configured logger instance.
    """
    global _configured

    if _configured:
        return structlog.get_logger()

    log_level = (level or get_settings().log_level).upper()
    numeric_level = getattr(logging, log_level, logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        level=numeric_level,
        handlers=_build_handlers(),
        force=True,
    )

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    _configured = True
    return structlog.get_logger()


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger, configuring logging lazily on first use.

    Args:
        name: Optional logger name (usually the module name).

    Returns:
        Bound logger instance.
    """
    if not _configured:
        configure_logging()

    logger = structlog.get_logger()
    if name:
        return logger.bind(logger_name=name)
    return logger
