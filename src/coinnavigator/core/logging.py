"""Structured logging for CoinNavigator.

This module configures structlog for console or JSON output. Logs go to
stderr so command output on stdout stays clean.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from coinnavigator.core.config import get_settings


def add_logger_name(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Record which logger emitted the entry.

    ``get_logger`` binds the name as context; entries from loggers created
    elsewhere fall back to the application name.
    """
    event_dict["logger"] = event_dict.pop("logger_name", "coinnavigator")
    return event_dict


def rename_message_field(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Rename the structlog "event" key to "message" for JSON consumers."""
    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")
    return event_dict


def stderr_logger_factory(*args: Any) -> structlog.PrintLogger:
    """Create a PrintLogger bound to the current sys.stderr.

    Resolving the stream per logger keeps output working when stderr is
    swapped out, e.g. by click.testing.CliRunner.
    """
    return structlog.PrintLogger(file=sys.stderr)


def configure_logging(settings: Any | None = None) -> None:
    """Configure structured logging for the application.

    Uses console formatting in development (or when ``log_format`` is
    ``console``) and JSON formatting otherwise.

    Args:
        settings: Optional settings instance. If not provided, will load from environment.
    """
    if settings is None:
        settings = get_settings()

    level = getattr(logging, settings.log_level)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.is_development or settings.log_format == "console":
        renderer: Processor = structlog.dev.ConsoleRenderer(
            colors=sys.stderr.isatty(),
            exception_formatter=structlog.dev.plain_traceback,
        )
        processors = shared_processors + [renderer]
    else:
        processors = shared_processors + [
            rename_message_field,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=stderr_logger_factory,
        cache_logger_on_first_use=False,
    )

    # Standard logging for third-party libraries (SQLAlchemy)
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=level,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Optional logger name. If not provided, uses 'coinnavigator'.

    Returns:
        BoundLogger: Configured structured logger instance.
    """
    name = name or "coinnavigator"
    return structlog.get_logger(name, logger_name=name)


class LoggingContext:
    """Context manager for adding logging context.

    Every log entry emitted inside the scope carries the bound values.

    Example:
        with LoggingContext(command="move", collection_name="Owned"):
            logger.info("Moving coin")  # Includes command and collection_name
    """

    def __init__(self, **kwargs: str) -> None:
        """Initialize logging context with key-value pairs.

        Args:
            **kwargs: Key-value pairs to add to logging context.
        """
        self.context = kwargs

    def __enter__(self) -> "LoggingContext":
        """Enter the context and add context variables."""
        structlog.contextvars.bind_contextvars(**self.context)
        return self

    def __exit__(self, *args: Any) -> None:
        """Exit the context and clear context variables."""
        structlog.contextvars.unbind_contextvars(*self.context.keys())
