"""
structlog setup for the Furrys Nexus API.

Every event is written to stdout as a single line: coloured key/value pairs when
ENVIRONMENT is "development", JSON otherwise. Lines emitted while a request is
being handled carry its request_id, and the caller's user_id once the auth
dependency has resolved it.
"""

import logging
import sys
from contextvars import ContextVar
from typing import Any, cast

import structlog
from structlog.types import EventDict, Processor

from nexus.config import settings

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
user_id_ctx: ContextVar[int | None] = ContextVar("user_id", default=None)

# Libraries whose INFO output drowns out ours
_QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "httpx")


def add_context_info(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Stamp request_id and user_id from the current request, when set."""
    for key, var in (("request_id", request_id_ctx), ("user_id", user_id_ctx)):
        value = var.get()
        if value is not None:
            event_dict.setdefault(key, value)
    return event_dict


def _renderer() -> list[Processor]:
    if settings.ENVIRONMENT == "development":
        return [structlog.dev.ConsoleRenderer(colors=True)]
    return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]


def configure_logging() -> None:
    """Install the processor chain; called once from the app factory."""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_context_info,
        structlog.processors.StackInfoRenderer(),
        *_renderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(logging.NOTSET),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.LOG_LEVEL.upper()),
    )

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    if settings.ENVIRONMENT != "development":
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Module logger. Events are snake_case verbs with ids as keyword fields:

        logger.info("artwork_liked", artwork_id=artwork.id, like_count=3)
    """
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))


def set_request_context(request_id: str, user_id: int | None = None) -> None:
    request_id_ctx.set(request_id)
    user_id_ctx.set(user_id)


def set_user_context(user_id: int) -> None:
    """Attach the authenticated caller to the rest of this request's events."""
    user_id_ctx.set(user_id)


def clear_request_context() -> None:
    request_id_ctx.set(None)
    user_id_ctx.set(None)
