"""Centralized logging configuration for Lane Rush processes."""

from __future__ import annotations

import logging
import os
from typing import Iterable

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"
LOG_LEVEL_ENV = "LANE_RUSH_LOG_LEVEL"


def configure_logging(
    *,
    level: str | None = None,
    format: str = DEFAULT_FORMAT,
    datefmt: str = DEFAULT_DATEFMT,
    include_httpx: bool = True,
    extra_loggers: Iterable[str] | None = None,
) -> logging.Logger:
    """Configure application logging.

    Args:
        level: Optional explicit log level. Falls back to ``LANE_RUSH_LOG_LEVEL``
            or INFO when not provided.
        format: Log format string.
        datefmt: Date format string.
        include_httpx: Whether to align the httpx/httpcore loggers. They are
            capped at WARNING unless DEBUG is requested, since they log every
            request at INFO.
        extra_loggers: Additional logger names to align with the configured level.

    Returns:
        The root logger of the simulation core (``racecore``).
    """

    raw_level = level if level is not None else os.getenv(LOG_LEVEL_ENV)
    resolved_level = (raw_level or "INFO").upper()
    logging.basicConfig(level=resolved_level, format=format, datefmt=datefmt)

    app_logger = logging.getLogger("racecore")
    app_logger.setLevel(resolved_level)
    logging.getLogger("raceservices").setLevel(resolved_level)

    if include_httpx:
        http_level = resolved_level if resolved_level == "DEBUG" else "WARNING"
        for http_logger in ("httpx", "httpcore"):
            logging.getLogger(http_logger).setLevel(http_level)

    if extra_loggers:
        for logger_name in extra_loggers:
            logging.getLogger(logger_name).setLevel(resolved_level)

    app_logger.debug("Logging configured", extra={"level": resolved_level, "format": format})
    return app_logger
