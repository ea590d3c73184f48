"""Structured logging with structlog and report_id context."""

import logging
import uuid
from collections.abc import Iterator, MutableMapping
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

import structlog

from marketlens.core.config import get_settings

# Context variable correlating every log line of one report computation
report_id_ctx: ContextVar[str | None] = ContextVar("report_id", default=None)


def add_report_id(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Add report_id from context to log events."""
    report_id = report_id_ctx.get()
    if report_id:
        event_dict["report_id"] = report_id
    return event_dict


@contextmanager
def report_context(report_id: str | None = None) -> Iterator[str]:
    """Bind a report_id to the logging context for the duration of a block.

    Args:
        report_id: Explicit id to bind. A random hex id is generated when omitted.

    Yields:
        The bound report id.
    """
    bound = report_id or uuid.uuid4().hex[:12]
    token = report_id_ctx.set(bound)
    try:
        yield bound
    finally:
        report_id_ctx.reset(token)


def configure_logging() -> None:
    """Configure structlog for the application."""
    settings = get_settings()

    shared_processors: list[structlog.types.Processor] = [
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        add_report_id,
    ]

    if settings.log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=settings.is_development)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.typing.FilteringBoundLogger:
    """Get a configured logger instance.

    Args:
        name: Logger name (typically __name__ of the calling module).

    Returns:
        Configured structlog logger with report_id binding.
    """
    logger: structlog.typing.FilteringBoundLogger = structlog.get_logger(name)
    return logger
