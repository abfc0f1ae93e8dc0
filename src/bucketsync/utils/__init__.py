"""Utility helpers for bucketsync."""

from .logging import setup_logging, get_logger, LoggerMixin, log_async_execution_time
from .mime import detect_content_type

__all__ = [
    "setup_logging",
    "get_logger",
    "LoggerMixin",
    "log_async_execution_time",
    "detect_content_type"
]
