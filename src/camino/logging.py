"""structlog setup for Camino.

Camino writes rendered templates to stdout, so every log line goes to
stderr (or a stream passed to ``configure_logging``). Two output formats:

- console (default): human-readable key/value lines
- JSON: one object per line, selected with ``CAMINO_LOG_FORMAT=json``

The level comes from ``CAMINO_LOG_LEVEL`` unless the caller passes one;
the CLI derives it from ``-v``/``-q`` and the ``verbosity`` setting.

Engine modules log with event names rather than prose::

    logger = get_logger(__name__)
    logger.debug("template_parsed", nodes=3, length=42)
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, TextIO

import structlog
from structlog.types import Processor

__all__ = [
    "get_logger",
    "configure_logging",
    "bind_context",
    "clear_context",
]

LOG_FORMAT_ENV_VAR = "CAMINO_LOG_FORMAT"
LOG_LEVEL_ENV_VAR = "CAMINO_LOG_LEVEL"

DEFAULT_LOG_LEVEL = logging.WARNING


def _level_from_env() -> int:
    name = os.environ.get(LOG_LEVEL_ENV_VAR, "").upper()
    level = logging.getLevelName(name) if name else DEFAULT_LOG_LEVEL
    return level if isinstance(level, int) else DEFAULT_LOG_LEVEL


def _wants_json() -> bool:
    return os.environ.get(LOG_FORMAT_ENV_VAR, "").strip().lower() == "json"


def _pre_chain() -> list[Processor]:
    """Processors applied to both structlog and plain stdlib records."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]


def _renderer(use_json: bool, stream: TextIO) -> Processor:
    if use_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=stream.isatty(),
        exception_formatter=structlog.dev.plain_traceback,
    )


def configure_logging(
    *,
    force_json: bool = False,
    level: int | None = None,
    stream: TextIO | None = None,
) -> None:
    """Route structlog and stdlib logging through one stderr handler.

    Safe to call more than once; each call replaces the previous handler.

    Args:
        force_json: Emit JSON regardless of ``CAMINO_LOG_FORMAT``.
        level: Log level; defaults to ``CAMINO_LOG_LEVEL`` or WARNING.
        stream: Destination; defaults to ``sys.stderr``.
    """
    use_json = force_json or _wants_json()
    log_level = level if level is not None else _level_from_env()
    out = stream if stream is not None else sys.stderr

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_pre_chain(),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(out)
    handler.setLevel(log_level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_pre_chain(),
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(use_json, out),
            ],
        )
    )

    root = logging.getLogger()
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(log_level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger, usually named after the calling module."""
    log: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return log


def bind_context(**context: Any) -> None:
    """Attach key/value pairs to every subsequent log line in this context.

    Example:
        bind_context(template="daily.tmpl")
    """
    structlog.contextvars.bind_contextvars(**context)


def clear_context() -> None:
    """Drop everything bound with ``bind_context``."""
    structlog.contextvars.clear_contextvars()
