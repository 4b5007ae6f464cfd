"""
Utility functions and helpers
"""

from .logging import setup_logging, get_logger, LoggerMixin
from .telemetry import EventCollector

__all__ = [
    "setup_logging",
    "get_logger",
    "LoggerMixin",
    "EventCollector",
]
