"""Log routing for the mdxe CLI.

All records go to stderr so compiled code on stdout stays clean. stdlib
loggers used by the library modules and any structlog loggers share one
processor chain; only the final renderer differs between the console
format and ``--log-json``.
"""

from __future__ import annotations

import logging
import sys

import structlog

# HTTP client loggers kept at WARNING even under --verbose.
_QUIET_LOGGERS: tuple[str, ...] = ("urllib3", "requests")


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _stderr_handler(chain: list[structlog.types.Processor], log_json: bool) -> logging.Handler:
    renderer: structlog.types.Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )
    return handler


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Install the stderr handler and set mdxe's log level.

    Args:
        verbose: Let ``mdxe.*`` DEBUG records through (cache hits, refreshes).
        log_json: Emit one JSON object per record instead of console lines.
    """
    chain = _shared_processors()
    structlog.configure(
        processors=[*chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(_stderr_handler(chain, log_json))
    root.setLevel(logging.WARNING)

    logging.getLogger("mdxe").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
