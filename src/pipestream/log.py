"""Logging setup.

Modules in this package obtain their loggers with :func:`get_logger` and
emit events with keyword context. Nothing is configured at import time;
applications that want pipestream output formatted consistently call
:func:`configure` once at startup.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

import structlog


_CONFIGURED = False


def configure(level: Optional[str] = None, json_output: bool = False, force: bool = False) -> None:
    """Configure structlog (and the stdlib root logger it renders through).

    Args:
        level: Log level name; defaults to ``PIPESTREAM_LOG_LEVEL`` or INFO.
        json_output: Render events as JSON lines instead of console text.
        force: Reconfigure even if :func:`configure` was already called.
    """
    global _CONFIGURED

    if _CONFIGURED and not force:
        return

    if level is None:
        level = os.environ.get("PIPESTREAM_LOG_LEVEL", "INFO")

    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        stream=sys.stderr,
    )

    timestamper = structlog.processors.TimeStamper(fmt="iso", utc=True)

    if json_output:
        renderer = structlog.processors.JSONRenderer(sort_keys=True)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            timestamper,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        cache_logger_on_first_use=True,
    )

    _CONFIGURED = True


def get_logger(name: str, **context):
    """Return a structlog logger for *name* carrying any extra *context*.

    The logger is a lazy proxy: it is assembled on first use, so loggers
    created at import time still honor a later :func:`configure`.
    """
    return structlog.get_logger(name, **context)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
