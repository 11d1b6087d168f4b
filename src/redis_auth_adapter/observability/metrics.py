"""Prometheus metrics for the Redis auth adapter.

Metrics include:

- Operation counters by outcome (hit, miss, ok)
- Stale index pointers removed while reading
- Sliding TTL refreshes that failed in the background

Examples:
    Recording a lookup that found nothing::

        from redis_auth_adapter.observability.metrics import record_operation

        record_operation("get_user", "miss")

    Recording a repaired index::

        from redis_auth_adapter.observability.metrics import record_index_repair

        record_index_repair("email")
"""

from prometheus_client import Counter

# Labels: operation (adapter method name), result (hit, miss, ok)
operations_total = Counter(
    "auth_adapter_operations_total",
    "Total number of adapter operations by outcome",
    ["operation", "result"],
)

# Labels: index (email, accounts_by_user, sessions_by_user)
index_repairs_total = Counter(
    "auth_adapter_index_repairs_total",
    "Total number of dangling index pointers removed on read",
    ["index"],
)

ttl_refresh_failures_total = Counter(
    "auth_adapter_ttl_refresh_failures_total",
    "Total number of background TTL refreshes that raised",
)


def record_operation(operation: str, result: str) -> None:
    """Record one completed adapter operation.

    Args:
        operation: Adapter method name, e.g. "get_user"
        result: "hit" or "miss" for lookups, "ok" for writes and deletes

    Examples:
        >>> record_operation("get_user", "hit")
        >>> record_operation("link_account", "ok")
    """
    operations_total.labels(operation=operation, result=result).inc()


def record_index_repair(index: str) -> None:
    """Record removal of a dangling index pointer.

    Examples:
        >>> record_index_repair("sessions_by_user")
    """
    index_repairs_total.labels(index=index).inc()


def record_ttl_refresh_failure() -> None:
    """Record a background TTL refresh that raised."""
    ttl_refresh_failures_total.inc()
