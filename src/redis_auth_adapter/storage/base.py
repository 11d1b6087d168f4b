"""Key-value client protocol for the auth adapter.

This module defines the minimal capability set the adapter needs from the
underlying store. The method names and signatures follow redis-py's asyncio
client, so a ``redis.asyncio.Redis`` instance created with
``decode_responses=True`` can be passed to the adapter unchanged.

Examples:
    Using a Redis client::

        import redis.asyncio as redis

        from redis_auth_adapter import RedisAuthAdapter

        client = redis.from_url("redis://localhost:6379/0", decode_responses=True)
        adapter = RedisAuthAdapter(client, base_key_prefix="myapp:")

    Implementing a custom client::

        class MyClient:
            async def get(self, name: str) -> str | None: ...
            async def set(self, name: str, value: str, ex: int | None = None) -> bool | None: ...
            async def delete(self, *names: str) -> int: ...
            async def expire(self, name: str, time: int) -> bool: ...
            async def sadd(self, name: str, *values: str) -> int: ...
            async def srem(self, name: str, *values: str) -> int: ...
            async def smembers(self, name: str) -> set[str]: ...

Consistency:
    The adapter issues every call as an independent request. No transactions,
    pipelines or pub/sub are used, and clients are not required to make a
    multi-key ``delete`` atomic.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

REQUIRED_CLIENT_METHODS = ("get", "set", "delete", "expire", "sadd", "srem", "smembers")


@runtime_checkable
class KeyValueClient(Protocol):
    """Protocol defining the store operations used by the adapter.

    Values are text. Clients returning ``bytes`` are tolerated and decoded as
    UTF-8 by the adapter.

    Error Handling:
        Any exception raised by a client method propagates unmodified through
        the adapter operation that issued it.
    """

    async def get(self, name: str) -> str | bytes | None:
        """Return the value stored at ``name`` or None when absent."""
        ...

    async def set(self, name: str, value: str, ex: int | None = None) -> bool | None:
        """Store ``value`` at ``name``, expiring after ``ex`` seconds when given."""
        ...

    async def delete(self, *names: str) -> int:
        """Delete the given keys and return how many existed."""
        ...

    async def expire(self, name: str, time: int) -> bool:
        """Reset the time-to-live of ``name`` to ``time`` seconds."""
        ...

    async def sadd(self, name: str, *values: str) -> int:
        """Add members to the set stored at ``name``."""
        ...

    async def srem(self, name: str, *values: str) -> int:
        """Remove members from the set stored at ``name``."""
        ...

    async def smembers(self, name: str) -> set[str] | set[bytes]:
        """Return all members of the set stored at ``name``."""
        ...
