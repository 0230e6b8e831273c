"""structlog setup for sciorag.

One processor chain feeds two renderers: a console renderer while
developing and a JSON renderer once ``APP_ENV`` is ``"production"`` (one
object per line, which is what the deployed function's log sink expects).
Everything goes to stderr; stdout belongs to CLI results.

The SDKs underneath (boto3/botocore, httpx, openai) log through stdlib
``logging``; their records are routed through the same chain and held at
WARNING unless the engine itself runs at DEBUG.

:func:`operation_context` binds the current document operation into
structlog's context variables so that the store, backend and embedding
events it triggers carry ``operation=...`` without each call passing it.
"""

from __future__ import annotations

import contextlib
import logging
import os
import sys
from typing import Any, Iterator

import structlog

# stdlib loggers owned by third-party SDKs.
_SDK_LOGGERS = ("botocore", "boto3", "s3transfer", "urllib3", "httpx", "httpcore", "openai")


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]


def configure_logging(
    log_level: str = "INFO",
    json_output: bool = False,
    app_env: str | None = None,
) -> structlog.BoundLogger:
    """Configure structlog and the stdlib bridge.

    Args:
        log_level: Level name for sciorag and the root logger.
        json_output: Force the JSON renderer regardless of environment.
        app_env: Deployment environment; read from ``APP_ENV`` when omitted.

    Returns:
        A logger bound to the new configuration.
    """
    env = app_env if app_env is not None else os.environ.get("APP_ENV", "development")
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    if json_output or env == "production":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    shared = _shared_processors()
    structlog.configure(
        processors=[*shared, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *shared,
                renderer,
            ],
        )
    )
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    sdk_level = level if level <= logging.DEBUG else max(level, logging.WARNING)
    for name in _SDK_LOGGERS:
        logging.getLogger(name).setLevel(sdk_level)

    return structlog.get_logger()


def get_logger(name: str) -> structlog.BoundLogger:
    """Return a logger named *name*, configuring defaults on first use."""
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(logger_name=name)


@contextlib.contextmanager
def operation_context(operation: str, **fields: Any) -> Iterator[None]:
    """Tag every event logged inside the block with *operation* and *fields*.

    Context variables follow the task, so events from awaited store, backend
    and embedding calls are tagged too.  Previous bindings are restored on
    exit.
    """
    with structlog.contextvars.bound_contextvars(operation=operation, **fields):
        yield
