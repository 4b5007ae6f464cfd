"""Logging for the rules engine.

Every module takes its logger from :func:`get_logger`, which writes to stdout
with the level and format of the settings.
"""

import logging
import sys

from github_pr_rules_engine.config import get_settings

PACKAGE_LOGGER = "github_pr_rules_engine"


def _level(name: str) -> int:
    return logging.getLevelNamesMapping().get(name.upper(), logging.INFO)


def setup_logging(
    name: str | None = None,
    level: str | None = None,
    format_string: str | None = None,
) -> logging.Logger:
    """Configure a logger with a single stdout handler.

    Args:
    ----
        name: Logger name, the package logger when omitted
        level: Level name, ``settings.log_level`` when omitted
        format_string: Record format, ``settings.log_format`` when omitted

    Returns:
    -------
        The configured logger

    """
    settings = get_settings()
    log_level = _level(level or settings.log_level)

    logger = logging.getLogger(name or PACKAGE_LOGGER)
    logger.setLevel(log_level)

    # A second call replaces the handler
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(log_level)
    stdout_handler.setFormatter(logging.Formatter(format_string or settings.log_format))
    logger.addHandler(stdout_handler)
    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, configured on first use."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        setup_logging(name)
    return logger


class LoggerMixin:
    """Gives instances a logger named after their class."""

    @property
    def logger(self) -> logging.Logger:
        cls = type(self)
        return get_logger(f"{cls.__module__}.{cls.__qualname__}")
