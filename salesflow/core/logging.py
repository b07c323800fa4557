"""
Structured logging with request and actor correlation.

structlog runs on top of the standard library logging module. Every event
carries the current request id and, once a caller has authenticated, the
id of the acting user. Development renders to the console, every other
environment emits JSON lines.
"""

import logging
import sys
import time
from contextvars import ContextVar
from typing import Any, Optional
from uuid import uuid4

import structlog
from structlog.types import EventDict, Processor

from salesflow.core.config import Settings, get_settings

SLOW_OPERATION_MS = 500

_request_id: ContextVar[str] = ContextVar("request_id", default="")
_user_id: ContextVar[Optional[str]] = ContextVar("user_id", default=None)

# Libraries that are chatty at INFO.
_QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "passlib")


def add_correlation_ids(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Copy the request id and acting user id onto the event when set."""
    request_id = _request_id.get()
    if request_id:
        event_dict.setdefault("request_id", request_id)
    user_id = _user_id.get()
    if user_id:
        event_dict.setdefault("user_id", user_id)
    return event_dict


def configure_logging(settings: Optional[Settings] = None) -> None:
    """
    Configure structlog and the root logger.

    Args:
        settings: Settings to configure from, cached settings when omitted
    """
    settings = settings or get_settings()

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_correlation_ids,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    renderer: Processor
    if settings.is_development:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True, exception_formatter=structlog.dev.plain_traceback
        )
    else:
        renderer = structlog.processors.JSONRenderer()
    processors.append(renderer)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level),
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def set_request_id(request_id: Optional[str] = None) -> str:
    """
    Start correlating log events with a request.

    Args:
        request_id: Incoming X-Request-ID, a fresh UUID when absent

    Returns:
        The request id now in effect
    """
    request_id = request_id or str(uuid4())
    _request_id.set(request_id)
    return request_id


def get_request_id() -> str:
    return _request_id.get()


def set_user_id(user_id: Optional[Any]) -> None:
    """Record the authenticated actor for the rest of the request."""
    _user_id.set(None if user_id is None else str(user_id))


def clear_context() -> None:
    _request_id.set("")
    _user_id.set(None)


class PerformanceLogger:
    """
    Times a block and logs its outcome.

    Completion is logged at INFO, or at WARNING past SLOW_OPERATION_MS.
    A block that raises is logged at ERROR and the exception propagates.
    """

    def __init__(self, logger: structlog.stdlib.BoundLogger, operation: str, **context: Any):
        self.logger = logger.bind(operation=operation, **context)
        self.started: Optional[float] = None

    def __enter__(self) -> "PerformanceLogger":
        self.started = time.perf_counter()
        self.logger.debug("Operation started")
        return self

    @property
    def elapsed_ms(self) -> float:
        if self.started is None:
            return 0.0
        return round((time.perf_counter() - self.started) * 1000, 2)

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.started is None:
            return
        if exc_type is not None:
            self.logger.error(
                "Operation failed", duration_ms=self.elapsed_ms, error_type=exc_type.__name__
            )
        elif self.elapsed_ms > SLOW_OPERATION_MS:
            self.logger.warning("Slow operation", duration_ms=self.elapsed_ms)
        else:
            self.logger.info("Operation completed", duration_ms=self.elapsed_ms)


def log_performance(
    logger: structlog.stdlib.BoundLogger, operation: str, **context: Any
) -> PerformanceLogger:
    """
    Example:
        >>> with log_performance(logger, "order_creation", customer_id=2):
        ...     service.create_order(actor, 2, line_items)
    """
    return PerformanceLogger(logger, operation, **context)
