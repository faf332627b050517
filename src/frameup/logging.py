"""Structured logging configuration.

Workflow operations bind their project and video ids with
`bind_workflow_context`, so every event emitted while a transition runs
(including adapter and notification logs) carries them.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog

from frameup.config import settings

APP_NAME = "frameup"


def _add_app_name(
    logger: Any, method_name: str, event_dict: structlog.typing.EventDict
) -> structlog.typing.EventDict:
    event_dict.setdefault("app", APP_NAME)
    return event_dict


def setup_logging(level: str | None = None) -> None:
    """Configure structured logging for the API, worker and CLI."""
    if settings.log_format == "json":
        renderer: Any = structlog.processors.JSONRenderer()
        exception_processor: Any = structlog.processors.dict_tracebacks
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
        exception_processor = structlog.processors.format_exc_info

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_app_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            exception_processor,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel((level or settings.log_level).upper())

    # Stripe requests are logged by the payment adapter itself
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("celery").setLevel(logging.INFO)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger instance for a module."""
    return structlog.get_logger(name)


@contextmanager
def bind_workflow_context(**context: Any) -> Iterator[None]:
    """Bind ids (project, video, action) to all log events inside the block."""
    values = {key: str(value) for key, value in context.items() if value is not None}
    with structlog.contextvars.bound_contextvars(**values):
        yield
