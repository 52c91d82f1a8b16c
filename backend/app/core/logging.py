"""
Logging Infrastructure
======================

structlog on top of the standard library:

- JSON lines (LOG_FORMAT=json) or plain console output
- Every entry stamped with the service name, environment and, inside a
  request, the request id
- uvicorn's own access log silenced; RequestContextMiddleware writes one
  `request_completed` entry per request instead
"""

from __future__ import annotations

import logging
import sys
import time
from contextvars import ContextVar
from functools import wraps
from typing import Any, Callable, Dict, Optional, TypeVar, ParamSpec

import structlog
from structlog.types import EventDict, Processor

from app.core.config import Settings

# Set by RequestContextMiddleware for the lifetime of a request
request_id_context: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

P = ParamSpec("P")
R = TypeVar("R")

# Loggers whose output duplicates ours or floods the console
_QUIET_LOGGERS = ("uvicorn.access",)


def add_request_id(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add the current request id, if any, to the entry."""
    request_id = request_id_context.get()
    if request_id:
        event_dict["request_id"] = request_id
    return event_dict


def service_context(settings: Settings) -> Processor:
    """Processor stamping the service name and environment on every entry."""
    static: Dict[str, Any] = {
        "service": settings.APP_NAME,
        "env": settings.ENVIRONMENT,
    }

    def processor(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        for key, value in static.items():
            event_dict.setdefault(key, value)
        return event_dict

    return processor


def get_log_level(settings: Settings) -> int:
    return logging.getLevelName(settings.LOG_LEVEL.upper())


def get_processors(settings: Settings) -> list[Processor]:
    """Processor chain; the renderer is always last."""
    renderer: Processor
    if settings.LOG_FORMAT == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_request_id,
        service_context(settings),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ]


def configure_logging(settings: Settings) -> None:
    """
    Configure stdlib logging and structlog from settings.

    Called by the application factory and the seed script.
    """
    level = get_log_level(settings)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    # SQL statements are echoed only in DEBUG mode (engine echo=True)
    if not settings.DEBUG:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    structlog.configure(
        processors=get_processors(settings),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structlog logger.

    Events are snake_case names with keyword fields:

        >>> log = get_logger(__name__)
        >>> log.info("incident_created", incident_id="123", severity="SEV1")
    """
    return structlog.get_logger(name)


def log_execution_time(
    log: structlog.stdlib.BoundLogger,
    operation: str,
    **extra_fields: Any
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """
    Time a function and log `<operation>_completed` (debug) or
    `<operation>_failed` (error, exception re-raised).

    Example:
        >>> @log_execution_time(log, "list_incidents")
        ... def list_incidents(db, query):
        ...     ...
    """
    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            start = time.perf_counter()

            def elapsed_ms() -> float:
                return round((time.perf_counter() - start) * 1000, 2)

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                log.error(
                    f"{operation}_failed",
                    duration_ms=elapsed_ms(),
                    success=False,
                    error=str(e),
                    error_type=type(e).__name__,
                    **extra_fields
                )
                raise
            log.debug(f"{operation}_completed", duration_ms=elapsed_ms(), success=True, **extra_fields)
            return result
        return wrapper
    return decorator
