"""Observability utilities for the Redis auth adapter.

This package provides monitoring and debugging capabilities:
- Prometheus counters for operation outcomes, index repairs and failed
  TTL refreshes
- Structured logging with contextual information
"""

from redis_auth_adapter.observability.logging import configure_logging, get_logger
from redis_auth_adapter.observability.metrics import (
    record_index_repair,
    record_operation,
    record_ttl_refresh_failure,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "record_operation",
    "record_index_repair",
    "record_ttl_refresh_failure",
]
