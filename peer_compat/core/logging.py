"""Structured logging for compatibility negotiation.

Console output is meant for the CLI; ``json`` suits endpoints that ship their
logs elsewhere. Every event carries the package version so logs from peers on
different releases can be told apart.
"""

from __future__ import annotations

import logging
import sys
from functools import lru_cache
from typing import Literal

import structlog

LogFormat = Literal["console", "json"]


@lru_cache(1)
def _package_version() -> str:
    from peer_compat import get_version

    return get_version()


def _add_package_version(_: object, __: str, event_dict: structlog.types.EventDict) -> structlog.types.EventDict:
    event_dict.setdefault("peer_compat", _package_version())
    return event_dict


def _renderer(log_format: LogFormat) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=False)


def setup_logging(level: str = "INFO", log_format: LogFormat = "console") -> None:
    """Route structlog and stdlib logging through one stdout handler."""

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    shared_processors: list[structlog.types.Processor] = [
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.add_log_level,
        _add_package_version,
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, _renderer(log_format)],
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers[:] = [handler]
    root_logger.setLevel(numeric_level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound to the supplied module name."""

    return structlog.get_logger(name)


__all__ = ["LogFormat", "setup_logging", "get_logger"]
