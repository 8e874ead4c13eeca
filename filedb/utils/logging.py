"""Structured logging setup for FileDB.

Uses structlog for JSON-structured logging with a component name,
optional correlation ID, and timestamps in every log entry. Logs go to
stderr; stdout is left to command output.
"""

import logging
import sys

import structlog


def configure_logging(json_output: bool = True, level: str = "INFO") -> None:
    """Configure structlog for the FileDB process.

    Args:
        json_output: If True (default), render logs as JSON.
                     If False, use console-friendly output for development.
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR).
    """
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    level_num = getattr(logging, level.upper(), logging.INFO)
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_num),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(component: str, correlation_id: str | None = None) -> structlog.BoundLogger:
    """Get a logger bound with component and optional correlation_id.

    Args:
        component: Name of the store or service requesting the logger.
        correlation_id: Optional ID for tracing one request across components.

    Returns:
        A structlog BoundLogger with component and correlation_id bound.
    """
    logger = structlog.get_logger()
    logger = logger.bind(component=component)
    if correlation_id:
        logger = logger.bind(correlation_id=correlation_id)
    return logger
