"""
Logging setup: structlog on top of the standard library, with request ids
bound through structlog's context variables.
"""

import logging
import re
import secrets
import sys

import structlog

from .config import settings

# Caller-supplied ids are echoed in responses and written to every log line
REQUEST_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]{1,64}")


def configure_logging(debug: bool = False, level: str | None = None) -> None:
    """Route structlog events through stdlib logging on stdout.

    Args:
        debug: Coloured console output at DEBUG level. Otherwise one JSON
            object per event.
        level: Level name used when not in debug mode (default: the
            `POINTS_LOG_LEVEL` setting).
    """
    if debug:
        log_level = logging.DEBUG
    else:
        log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)

    logging.basicConfig(level=log_level, stream=sys.stdout, format="%(message)s", force=True)

    renderer = (
        structlog.dev.ConsoleRenderer(colors=True)
        if debug
        else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="ISO", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.stdlib.get_logger(name)


def generate_request_id() -> str:
    """A 14-character URL-safe random id."""
    return secrets.token_urlsafe(10)


def accept_request_id(candidate: str | None) -> str:
    """Keep a caller's X-Request-ID if it is short and URL-safe, else mint one."""
    if candidate and REQUEST_ID_PATTERN.fullmatch(candidate):
        return candidate
    return generate_request_id()


def set_request_context(request_id: str | None = None) -> str:
    """Bind the request id to every log event of the current request."""
    request_id = accept_request_id(request_id)
    structlog.contextvars.bind_contextvars(request_id=request_id)
    return request_id


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


def get_request_id() -> str | None:
    return structlog.contextvars.get_contextvars().get("request_id")
