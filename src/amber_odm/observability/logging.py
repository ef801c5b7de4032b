"""Structured logging configuration using structlog."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from amber_odm.config.settings import ObservabilitySettings

LIBRARY_LOGGER = "amber_odm"


def _level(name: str | None, default: int) -> int:
    if not name:
        return default
    return getattr(logging, name.upper(), default)


def setup_logging(settings: ObservabilitySettings | None = None) -> None:
    """Route amber_odm logs, and structlog loggers, to stdout.

    The library logs through ``logging.getLogger(__name__)`` under the
    ``amber_odm`` namespace. ``library_log_level`` tunes that namespace
    apart from the application, e.g. ``debug`` to trace client creation
    and search hit counts while the root logger stays at ``info``.

    Args:
        settings: Observability settings. Uses defaults if None.
    """
    root_level = _level(settings.log_level if settings else None, logging.INFO)
    library_level = _level(settings.library_log_level if settings else None, root_level)
    log_format = settings.log_format if settings else "json"

    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    processors.append(
        structlog.dev.ConsoleRenderer() if log_format == "console" else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=root_level)
    logging.getLogger(LIBRARY_LOGGER).setLevel(library_level)
