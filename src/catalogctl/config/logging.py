"""Logging setup for catalogctl.

Everything goes to stderr; stdout carries command results only.  Our own
``catalogctl.*`` loggers, SQLAlchemy's engine logger and any other stdlib
logger share one handler whose formatter is structlog's
``ProcessorFormatter``, so a line looks the same whoever emitted it.
"""

from __future__ import annotations

import logging
import sys

import structlog

SQL_LOGGER = "sqlalchemy.engine"


def _processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    sql_echo: bool = False,
) -> None:
    """Install the stderr handler and set logger levels.

    Args:
        verbose: ``catalogctl`` loggers emit DEBUG (transactions, inserts,
            reparenting) instead of WARNING and above.
        log_json: One JSON object per line instead of console rendering.
        sql_echo: Log every SQL statement at INFO through the same handler
            (``[database] echo``).  The engine is never created with
            ``echo=True``, which would print to stdout.

    Safe to call more than once: the root handler is replaced, not added.
    """
    shared = _processors()
    renderer: structlog.types.Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger("catalogctl").setLevel(logging.DEBUG if verbose else logging.WARNING)
    logging.getLogger(SQL_LOGGER).setLevel(logging.INFO if sql_echo else logging.WARNING)
