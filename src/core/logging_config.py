"""Structured logging configuration.

This module initializes structlog with a stable JSON event format and
maps the CLI log level names onto stdlib levels for client libraries.
"""

from __future__ import annotations

import logging
from typing import Any

import structlog

from core.constants import DEFAULT_LOG_LEVEL

_LEVEL_BY_NAME = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}
_CLIENT_LOGGER_NAMES = ("elasticsearch", "elastic_transport")


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog logger with structured JSON output.
    """
    if not structlog.is_configured():
        configure_logging(DEFAULT_LOG_LEVEL)
    return structlog.get_logger(name)


def configure_logging(level_name: str) -> int:
    """Configure structlog and client library loggers for one level.

    Args:
        level_name: One of trace, debug, info, warn, error.

    Returns:
        Resolved stdlib level number.
    """
    level = resolve_log_level(level_name)
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=False,
    )
    for logger_name in _CLIENT_LOGGER_NAMES:
        logging.getLogger(logger_name).setLevel(level)
    return level


def resolve_log_level(level_name: str | None) -> int:
    """Resolve a level name, falling back to info for unknown names."""
    if level_name is None:
        return logging.INFO
    return _LEVEL_BY_NAME.get(level_name.strip().lower(), logging.INFO)
