"""Structured logging for OneFact.

Every module logs through ``get_logger(__name__)`` with key/value events.
Collection code binds ``pass_id`` and ``source`` with ``log_context`` so
lines emitted deep inside an adapter or the processor can be traced back
to the pass and source that produced them.

Rendering: JSON in production, colored console lines elsewhere.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from onefact.core.config import get_config

# Chatty client libraries; kept at WARNING unless LOG_LEVEL is DEBUG
QUIET_LOGGERS = ("httpx", "httpcore", "LiteLLM")


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Stamp events with the app name and environment."""
    config = get_config()
    event_dict.setdefault("app", config.app_name)
    event_dict.setdefault("env", config.app_env)
    return event_dict


@contextmanager
def log_context(**values: Any) -> Iterator[None]:
    """Bind key/values to every log line emitted inside the block.

    Bindings live in context variables, so asyncio tasks created inside the
    block inherit them and bindings made inside a task stay in that task.

    Example:
        >>> with log_context(pass_id="3f2a9c1e", source="wikipedia"):
        ...     logger.info("Source collected", fetched=12)
    """
    with structlog.contextvars.bound_contextvars(**values):
        yield


def _renderers(production: bool) -> list[Processor]:
    if production:
        return [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    return [structlog.processors.format_exc_info, structlog.dev.ConsoleRenderer(colors=True)]


def setup_logging() -> None:
    """Configure structlog and the standard library root logger.

    Safe to call more than once (the API, Celery worker and tests all call
    it). The level comes from ``LOG_LEVEL``; callsite info is added in
    development only.
    """
    config = get_config()
    level = getattr(logging, config.log_level)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    quiet_level = level if level <= logging.DEBUG else max(level, logging.WARNING)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_app_context,
    ]
    if config.is_development:
        processors.append(
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                    structlog.processors.CallsiteParameter.LINENO,
                ]
            )
        )
    processors.extend(_renderers(config.is_production))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger, usually ``get_logger(__name__)``."""
    return structlog.get_logger(name)


__all__ = [
    "QUIET_LOGGERS",
    "add_app_context",
    "get_logger",
    "log_context",
    "setup_logging",
]
