"""structlog configuration for identkit hosts.

identkit only emits records (stdlib loggers under ``identkit.*`` and a few
structlog event loggers). A host that wants to see them calls
:func:`configure_logging`, which routes the ``identkit`` logger tree to its
own stderr handler and leaves the root logger alone.

Two output modes:
- Human (default): console-rendered lines
- JSON (log_json=True): one JSON object per line
"""

from __future__ import annotations

import logging
import sys
from typing import IO, TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from identkit.config.settings import IdentkitSettings

LOGGER_NAME = "identkit"
HANDLER_NAME = "identkit-structlog"

_SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
]


def _renderer(log_json: bool, stream: IO[str]) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=stream.isatty())


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    stream: IO[str] | None = None,
) -> None:
    """Route identkit log output through structlog.

    Safe to call repeatedly: the handler installed by a previous call is
    replaced, never duplicated.

    Args:
        verbose: DEBUG for ``identkit`` loggers (resolution misses and
            wrapped faults). When False, only WARNING+.
        log_json: Use the JSON renderer instead of the console renderer.
        stream: Destination, stderr by default.
    """
    out = stream if stream is not None else sys.stderr

    structlog.configure(
        processors=[
            *_SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(out)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_SHARED_PROCESSORS,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json, out),
            ],
        )
    )

    pkg_logger = logging.getLogger(LOGGER_NAME)
    for existing in [h for h in pkg_logger.handlers if h.get_name() == HANDLER_NAME]:
        pkg_logger.removeHandler(existing)
    pkg_logger.addHandler(handler)
    pkg_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    pkg_logger.propagate = False


def configure_from_settings(settings: IdentkitSettings) -> None:
    """Apply ``verbose``/``log_json`` from loaded settings."""
    configure_logging(verbose=settings.verbose, log_json=settings.log_json)
