"""
Structured logging utility for export comparison.

Provides JSON-formatted logging with context injection and operation timing,
so comparison runs inside CI produce machine-parseable logs.
"""

import json
import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional
from functools import wraps

PACKAGE_LOGGER_NAME = "export_parity"


def shorten_path(path: Any, keep: int = 3) -> str:
    """
    Shorten a filesystem path for log context.

    Keeps the last ``keep`` components so scratch-directory prefixes do not
    swamp the log line.

    Example:
        >>> shorten_path("/tmp/scratch/export1/puppetdb-bak/catalogs/host.json")
        ".../puppetdb-bak/catalogs/host.json"
    """
    if path is None or path == "":
        return "unknown"

    parts = str(path).replace("\\", "/").rstrip("/").split("/")
    if len(parts) <= keep:
        return "/".join(parts)
    return ".../" + "/".join(parts[-keep:])


class StructuredLogger:
    """
    JSON-formatted logger with context injection and operation timing.

    All log output is one JSON object per line. Library loggers add no
    handlers and keep the level they inherit from the package logger; the
    application attaches output through configure_logging().
    """

    def __init__(self, name: str, level: Optional[int] = None):
        """
        Initialize structured logger.

        Args:
            name: Logger name (typically __name__ from calling module)
            level: Optional level override (defaults to the inherited level)
        """
        self.logger = logging.getLogger(name)
        if level is not None:
            self.logger.setLevel(level)

    def _format_log(
        self,
        level: str,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        duration_ms: Optional[float] = None,
        error: Optional[str] = None,
    ) -> str:
        """
        Format log entry as JSON.

        Args:
            level: Log level (DEBUG, INFO, WARNING, ERROR)
            message: Human-readable message
            operation: Operation name (e.g., "compare_archives")
            context: Context dict with paths, counts, etc.
            duration_ms: Operation duration in milliseconds
            error: Error message if applicable

        Returns:
            JSON-formatted log string
        """
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": level,
            "message": message,
        }

        if operation:
            log_entry["operation"] = operation

        if context:
            log_entry["context"] = context

        if duration_ms is not None:
            log_entry["duration_ms"] = round(duration_ms, 2)

        if error:
            log_entry["error"] = error

        return json.dumps(log_entry, ensure_ascii=False, default=str)

    def debug(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """Log debug message."""
        log_json = self._format_log("DEBUG", message, operation, context)
        self.logger.debug(log_json)

    def info(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        duration_ms: Optional[float] = None,
    ):
        """Log info message."""
        log_json = self._format_log("INFO", message, operation, context, duration_ms)
        self.logger.info(log_json)

    def warning(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
    ):
        """Log warning message."""
        log_json = self._format_log("WARNING", message, operation, context, error=error)
        self.logger.warning(log_json)

    def error(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
        duration_ms: Optional[float] = None,
    ):
        """Log error message."""
        log_json = self._format_log(
            "ERROR", message, operation, context, duration_ms, error
        )
        self.logger.error(log_json)


def log_operation(operation_name: str, context_keys: Iterable[str] = ()):
    """
    Decorator to automatically log operation start, duration, and completion.

    Keyword arguments named in ``context_keys`` are added to the log context
    (paths are shortened).

    Usage:
        @log_operation("compare_archives", context_keys=("root_a", "root_b"))
        def compare_archives(root_a, root_b):
            ...
    """
    context_keys = tuple(context_keys)

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            logger = StructuredLogger(func.__module__)

            context: Dict[str, Any] = {
                "function": func.__name__,
            }

            if len(args) > 0:
                context["arg_count"] = len(args)
            for key in context_keys:
                if key in kwargs:
                    context[key] = shorten_path(kwargs[key])

            logger.debug(
                f"Starting {operation_name}", operation=operation_name, context=context
            )

            start_time = time.time()
            try:
                result = func(*args, **kwargs)
                duration_ms = (time.time() - start_time) * 1000
                logger.info(
                    f"Completed {operation_name}",
                    operation=operation_name,
                    context=context,
                    duration_ms=duration_ms,
                )
                return result
            except Exception as e:
                duration_ms = (time.time() - start_time) * 1000
                logger.error(
                    f"Failed {operation_name}",
                    operation=operation_name,
                    context=context,
                    error=str(e),
                    duration_ms=duration_ms,
                )
                raise

        return wrapper

    return decorator


def configure_logging(level: str = "INFO") -> None:
    """
    Send package logs to stderr at the given level.

    Attaches a single JSON-line handler to the package logger (repeated calls
    reuse it) and sets the level of every logger under the package namespace.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.setLevel(getattr(logging, level.upper()))

    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        package_logger.addHandler(handler)

    for name in list(logging.root.manager.loggerDict):
        if name.startswith(PACKAGE_LOGGER_NAME + "."):
            logging.getLogger(name).setLevel(getattr(logging, level.upper()))


def get_logger(name: str) -> StructuredLogger:
    """
    Factory function to get a structured logger instance.

    Args:
        name: Logger name (typically __name__ from calling module)

    Returns:
        StructuredLogger instance
    """
    return StructuredLogger(name)
