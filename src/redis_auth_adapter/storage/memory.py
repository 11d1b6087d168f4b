"""In-memory key-value store implementing the KeyValueClient protocol.

This module provides a single-process stand-in for Redis that supports the
subset of commands the auth adapter uses: string get/set, multi-key delete,
expire, and the set commands backing the by-user-id indexes.

The MemoryKeyValueStore is suitable for:
    - Development and testing
    - Single-process applications that do not need persistence

Expiry:
    - Each key carries an optional absolute deadline taken from ``clock``
    - A key whose deadline has been reached is treated as absent and is
      evicted lazily on the next access
    - ``set`` without ``ex`` clears any previous deadline, matching Redis

Examples:
    Basic usage::

        from redis_auth_adapter.storage.memory import MemoryKeyValueStore

        store = MemoryKeyValueStore()
        await store.set("user:1", '{"id": "1"}', ex=60)
        await store.get("user:1")

    Controlling time in tests::

        class FakeClock:
            now = 0.0

            def __call__(self) -> float:
                return self.now

        clock = FakeClock()
        store = MemoryKeyValueStore(clock=clock)
        await store.set("k", "v", ex=10)
        clock.now = 11
        assert await store.get("k") is None
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

from redis_auth_adapter.storage.base import KeyValueClient


class WrongTypeError(TypeError):
    """Operation against a key holding the wrong kind of value."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"WRONGTYPE Operation against key {name!r} holding the wrong kind of value"
        )
        self.name = name


@dataclass
class _Entry:
    value: str | set[str]
    expires_at: float | None = None


class MemoryKeyValueStore(KeyValueClient):
    """Dictionary-backed key-value store with Redis-like expiry.

    Attributes:
        _entries: Mapping of key to stored value and optional deadline.
        _clock: Callable returning the current time in seconds.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._entries: dict[str, _Entry] = {}
        self._clock = clock

    def _live(self, name: str) -> _Entry | None:
        entry = self._entries.get(name)
        if entry is None:
            return None
        if entry.expires_at is not None and entry.expires_at <= self._clock():
            del self._entries[name]
            return None
        return entry

    def _live_set(self, name: str) -> set[str] | None:
        entry = self._live(name)
        if entry is None:
            return None
        if not isinstance(entry.value, set):
            raise WrongTypeError(name)
        return entry.value

    async def get(self, name: str) -> str | None:
        """Return the string stored at ``name`` or None when absent or expired.

        Raises:
            WrongTypeError: If ``name`` holds a set.
        """
        entry = self._live(name)
        if entry is None:
            return None
        if isinstance(entry.value, set):
            raise WrongTypeError(name)
        return entry.value

    async def set(self, name: str, value: str, ex: int | None = None) -> bool:
        """Store ``value`` at ``name``, replacing any previous value and deadline."""
        expires_at = self._clock() + ex if ex is not None else None
        self._entries[name] = _Entry(value=value, expires_at=expires_at)
        return True

    async def delete(self, *names: str) -> int:
        """Delete the given keys and return the number that existed."""
        removed = 0
        for name in names:
            if self._live(name) is not None:
                del self._entries[name]
                removed += 1
        return removed

    async def expire(self, name: str, time: int) -> bool:
        """Reset the deadline of ``name`` to ``time`` seconds from now.

        Returns:
            True if the key exists, False otherwise.
        """
        entry = self._live(name)
        if entry is None:
            return False
        entry.expires_at = self._clock() + time
        return True

    async def sadd(self, name: str, *values: str) -> int:
        """Add members to the set at ``name`` and return how many were new."""
        members = self._live_set(name)
        if members is None:
            members = set()
            self._entries[name] = _Entry(value=members)
        added = len(set(values) - members)
        members.update(values)
        return added

    async def srem(self, name: str, *values: str) -> int:
        """Remove members from the set at ``name``; empty sets are deleted."""
        members = self._live_set(name)
        if members is None:
            return 0
        removed = len(members & set(values))
        members.difference_update(values)
        if not members:
            del self._entries[name]
        return removed

    async def smembers(self, name: str) -> set[str]:
        """Return a copy of the members of the set at ``name``."""
        members = self._live_set(name)
        return set(members) if members is not None else set()

    async def ttl(self, name: str) -> int:
        """Return remaining seconds to live, -1 without deadline, -2 if absent."""
        entry = self._live(name)
        if entry is None:
            return -2
        if entry.expires_at is None:
            return -1
        return int(entry.expires_at - self._clock())

    def keys(self) -> list[str]:
        """Return the sorted list of live keys."""
        return sorted(name for name in list(self._entries) if self._live(name) is not None)

    async def flushdb(self) -> None:
        """Remove every key."""
        self._entries.clear()
