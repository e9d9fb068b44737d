"""structlog setup for the explorer service.

Events are named in snake_case (``collection_loaded``, ``selection_stale``)
and carry their data as keyword arguments. The HTTP layer binds the explorer
session and collection into contextvars so every event of a request is
tagged with them.

Development runs render events on a colored console. Production runs
(``ENVIRONMENT=production``) write one JSON object per line, tagged with the
service name.

Usage:
    from mead.core.logging import configure_logging, get_logger

    configure_logging()  # once, in api_main
    logger = get_logger(__name__)
    logger.info("collection_loaded", collection="conditions", count=42)
"""

import logging
import sys
from os import getenv
from typing import Any, cast

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

SERVICE_NAME = "mead-explorer"

# Chatty at INFO: one line per upstream request or per HTTP access
_QUIET_LOGGERS = ("aiohttp", "uvicorn.access")


def _add_service(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def _drop_color_message(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    # uvicorn passes a colored duplicate of the message as an extra
    event_dict.pop("color_message", None)
    return event_dict


def configure_logging(
    development: bool | None = None,
    log_level: str | None = None,
) -> None:
    """Route structlog and stdlib logging through one renderer.

    Args:
        development: Console output when True, JSON lines when False. Read
            from ENVIRONMENT when None; anything but "production" counts as
            development.
        log_level: DEBUG, INFO, WARNING or ERROR. Read from LOG_LEVEL when
            None; unknown names fall back to INFO.
    """
    if development is None:
        development = getenv("ENVIRONMENT", "development").lower() != "production"
    if log_level is None:
        log_level = getenv("LOG_LEVEL", "INFO")

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _drop_color_message,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if development:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors += [
            _add_service,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # force=True replaces handlers installed by uvicorn or pytest
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=numeric_level,
        force=True,
    )
    logging.getLogger().setLevel(numeric_level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Logger for a module; pass ``__name__``."""
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))


def bind_contextvars(**kwargs: Any) -> None:
    """Tag every following event of the current task with ``kwargs``.

    Example:
        bind_contextvars(session_id="3f2a...", collection="regions")
        logger.info("query_updated")  # carries session_id and collection
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_contextvars() -> None:
    """Drop every tag bound with bind_contextvars()."""
    structlog.contextvars.clear_contextvars()


def unbind_contextvars(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)
