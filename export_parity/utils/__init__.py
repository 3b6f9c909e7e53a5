"""Shared utilities."""

from .logger import StructuredLogger, configure_logging, get_logger, log_operation, shorten_path

__all__ = [
    "StructuredLogger",
    "configure_logging",
    "get_logger",
    "log_operation",
    "shorten_path",
]
