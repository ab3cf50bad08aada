"""
Structured logging for the catalog client.

Everything is written to stderr: stdout belongs to the CLI's JSON
output. httpx and httpcore log each request through the standard
library; they are held at WARNING unless DEBUG is requested.
"""

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from structlog.types import Processor

from game_catalog.config import LoggingConfig, get_settings

_HTTP_LOGGERS = ("httpx", "httpcore")


def _processors(config: LoggingConfig) -> list["Processor"]:
    chain: list[Processor] = [structlog.contextvars.merge_contextvars]
    if config.include_timestamp:
        chain.append(structlog.processors.TimeStamper(fmt="iso", utc=True))
    chain += [
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if config.format == "json":
        chain.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        chain.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stderr.isatty(),
                exception_formatter=structlog.dev.plain_traceback,
            )
        )
    return chain


def setup_logging(config: LoggingConfig | None = None) -> None:
    """
    Configure structlog and the stdlib loggers used by the HTTP stack.

    Args:
        config: Logging section to apply (defaults to the cached settings)
    """
    config = config or get_settings().logging
    level = logging.getLevelName(config.level)

    structlog.configure(
        processors=_processors(config),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(name)s %(levelname)s %(message)s", stream=sys.stderr, level=level)
    http_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in _HTTP_LOGGERS:
        logging.getLogger(name).setLevel(http_level)


def get_logger(name: str | None = None, **initial_context: Any) -> Any:
    """
    Logger carrying ``initial_context`` on every event.

    The logger is resolved lazily, so module-level loggers pick up the
    configuration applied later by setup_logging().

    Example:
        >>> logger = get_logger(__name__, component="coordinator")
        >>> logger.info("Applied listing page", page=2)
    """
    return structlog.get_logger(name, **initial_context)
