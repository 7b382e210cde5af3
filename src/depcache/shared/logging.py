"""
Structured logging for depcache.

Helpers that record cache operations with their context attached as
``extra`` fields, plus a logger factory that renders them either through
Rich on the console or as JSON lines.

Nothing here runs at import time; applications opt in with
:func:`setup_structured_logger` or :func:`configure_logging`.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

from depcache.shared.constants import Logging
from depcache.shared.errors import DepCacheError, ErrorContext

if TYPE_CHECKING:
    from depcache.config.settings import LoggingSettings


class StructuredFormatter(logging.Formatter):
    """Formats log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        """
        Format a log record as JSON.

        Args:
            record: The log record

        Returns:
            JSON string for the record
        """
        log_entry = {
            "timestamp": datetime.fromtimestamp(
                record.created,
                tz=timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in ("error_code", "context", "operation", "duration_ms", "result_info"):
            if hasattr(record, field):
                log_entry[field] = getattr(record, field)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


def _create_rich_console() -> Console:
    """Create the Rich console used for log output."""
    custom_theme = Theme(
        {
            "logging.level.debug": "cyan",
            "logging.level.info": "green",
            "logging.level.warning": "yellow",
            "logging.level.error": "red bold",
            "logging.level.critical": "red bold reverse",
            "log.time": "dim cyan",
            "log.path": "dim blue",
        }
    )
    return Console(theme=custom_theme, stderr=True)


def setup_structured_logger(
    name: str = Logging.ROOT_LOGGER,
    level: str = Logging.DEFAULT_LEVEL,
    log_file: str | None = None,
    *,
    use_rich_console: bool = True,
) -> logging.Logger:
    """
    Configure a logger for structured output.

    Args:
        name: Logger name (default: "depcache")
        level: Log level name (default: "INFO")
        log_file: Optional path of a JSON-lines log file
        use_rich_console: Render console output with Rich instead of JSON

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)

    # Avoid duplicate handlers when called more than once
    if logger.handlers:
        logger.handlers.clear()

    log_level = getattr(logging, level.upper())
    logger.setLevel(log_level)

    if use_rich_console:
        handler: logging.Handler = RichHandler(
            console=_create_rich_console(),
            show_time=True,
            show_level=True,
            show_path=True,
            markup=False,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
            log_time_format="[%H:%M:%S]",
        )
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(StructuredFormatter())
    handler.setLevel(log_level)
    logger.addHandler(handler)

    # File output is always JSON
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(StructuredFormatter())
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


def configure_logging(settings: LoggingSettings) -> logging.Logger:
    """Configure the package logger from a :class:`LoggingSettings`."""
    return setup_structured_logger(
        level=settings.level,
        log_file=settings.file,
        use_rich_console=settings.use_rich_console,
    )


def _context_to_dict(context: dict[str, Any] | ErrorContext | None) -> dict[str, Any]:
    if context is None:
        return {}
    if isinstance(context, ErrorContext):
        return context.safe_dict()
    return dict(context)


def log_operation_error(
    logger: logging.Logger,
    error: DepCacheError,
    operation: str | None = None,
    additional_context: dict[str, Any] | ErrorContext | None = None,
) -> None:
    """
    Record a DepCacheError with its structured context.

    Args:
        logger: Logger to write to
        error: The error being reported
        operation: Operation name, defaults to the error context's operation
        additional_context: Extra context merged over the error's own
    """
    context_dict = error.context.safe_dict()
    context_dict.update(_context_to_dict(additional_context))

    logger.error(
        error.message,
        extra={
            "error_code": error.code.value,
            "context": context_dict,
            "operation": operation or error.context.operation,
        },
        exc_info=error.original_error,
    )


def log_operation_success(
    logger: logging.Logger,
    operation: str,
    duration_ms: float,
    result_info: dict[str, Any] | None = None,
    context: dict[str, Any] | ErrorContext | None = None,
) -> None:
    """
    Record a completed operation at DEBUG level.

    Args:
        logger: Logger to write to
        operation: Operation name
        duration_ms: Elapsed time in milliseconds
        result_info: Optional result details
        context: Optional context
    """
    logger.debug(
        "Operation '%s' completed successfully",
        operation,
        extra={
            "operation": operation,
            "duration_ms": duration_ms,
            "result_info": result_info or {},
            "context": _context_to_dict(context),
        },
    )


def log_operation_start(
    logger: logging.Logger,
    operation: str,
    context: dict[str, Any] | None = None,
) -> None:
    """
    Record the start of an operation at DEBUG level.

    Args:
        logger: Logger to write to
        operation: Operation name
        context: Optional context
    """
    logger.debug(
        "Starting operation '%s'",
        operation,
        extra={
            "operation": operation,
            "context": context or {},
        },
    )
