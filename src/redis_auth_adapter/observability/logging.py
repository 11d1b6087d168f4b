"""Structured logging configuration for the Redis auth adapter.

This module provides structured logging using structlog to emit
JSON-formatted logs with contextual information. This makes logs
easier to parse and analyze in log aggregation systems.

Adapter events carry:
- The store key involved
- The user id, where one is known
- The index name for repairs

Examples:
    Configure logging::

        from redis_auth_adapter.observability.logging import configure_logging

        configure_logging(level="INFO", json_output=True)

    Use the logger::

        from redis_auth_adapter.observability.logging import get_logger

        logger = get_logger(__name__)
        logger.info(
            "index.repaired",
            index="email",
            key="user:email:ada@example.com",
        )

    Output (JSON)::

        {
            "event": "index.repaired",
            "index": "email",
            "key": "user:email:ada@example.com",
            "timestamp": "2024-01-01T00:00:00.000000Z",
            "level": "info"
        }
"""

import logging
import sys
from typing import Any, TextIO

import structlog


def configure_logging(
    level: str = "INFO",
    json_output: bool = True,
    stream: TextIO | None = None,
) -> None:
    """Configure structured logging for the adapter.

    Call once at application startup. Applications that already configure
    structlog can skip this; the adapter only ever calls ``get_logger``.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: If True, emit JSON logs; if False, use console format
        stream: Destination for rendered lines. Defaults to stdout.

    Examples:
        >>> configure_logging(level="DEBUG", json_output=False)
    """
    log_level = getattr(logging, level.upper())
    output = stream if stream is not None else sys.stdout

    logging.basicConfig(format="%(message)s", stream=output, level=log_level)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=output),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str, **initial_values: Any) -> Any:
    """Get a structured logger, optionally pre-bound with context.

    Args:
        name: Logger name (typically __name__ from the calling module)
        **initial_values: Key/value pairs bound to every event

    Examples:
        >>> logger = get_logger(__name__, key_prefix="tenant-a:")
        >>> logger.info("adapter.created")
    """
    return structlog.get_logger(name, **initial_values)
