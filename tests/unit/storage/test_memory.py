"""Unit tests for MemoryKeyValueStore.

This test suite covers:
    - String get/set/delete
    - Expiry, expire() and ttl()
    - Set commands backing the by-user-id indexes
    - Type errors between strings and sets
"""

import pytest

from redis_auth_adapter.storage.base import KeyValueClient
from redis_auth_adapter.storage.memory import MemoryKeyValueStore, WrongTypeError


# ============================================================================
# Basic Operations
# ============================================================================


@pytest.mark.asyncio
async def test_get_nonexistent_key(store):
    """Test that get() returns None for a nonexistent key."""
    assert await store.get("nonexistent") is None


@pytest.mark.asyncio
async def test_set_then_get(store):
    """Test that set() stores a value get() returns."""
    assert await store.set("k", "v") is True
    assert await store.get("k") == "v"


@pytest.mark.asyncio
async def test_set_overwrites(store):
    """Test that a second set() replaces the value."""
    await store.set("k", "v1")
    await store.set("k", "v2")
    assert await store.get("k") == "v2"


@pytest.mark.asyncio
async def test_delete_counts_existing_keys(store):
    """Test that delete() removes keys and counts only those that existed."""
    await store.set("a", "1")
    await store.set("b", "2")

    assert await store.delete("a", "b", "missing") == 2
    assert store.keys() == []


@pytest.mark.asyncio
async def test_delete_without_keys(store):
    """Test that delete() of nothing removes nothing."""
    assert await store.delete() == 0


# ============================================================================
# Expiry
# ============================================================================


@pytest.mark.asyncio
async def test_set_with_ex_expires(store, clock):
    """Test that a key set with ex disappears once the deadline passes."""
    await store.set("k", "v", ex=10)

    clock.advance(9)
    assert await store.get("k") == "v"

    clock.advance(1)
    assert await store.get("k") is None


@pytest.mark.asyncio
async def test_set_without_ex_clears_deadline(store, clock):
    """Test that set() without ex removes a previous deadline."""
    await store.set("k", "v", ex=10)
    await store.set("k", "v")

    clock.advance(100)
    assert await store.get("k") == "v"


@pytest.mark.asyncio
async def test_expire_resets_deadline(store, clock):
    """Test that expire() restarts the countdown."""
    await store.set("k", "v", ex=10)
    clock.advance(8)

    assert await store.expire("k", 10) is True
    clock.advance(8)
    assert await store.get("k") == "v"


@pytest.mark.asyncio
async def test_expire_missing_key(store):
    """Test that expire() reports a missing key."""
    assert await store.expire("missing", 10) is False


@pytest.mark.asyncio
async def test_ttl(store, clock):
    """Test ttl() for keys with, without and missing a deadline."""
    await store.set("with", "v", ex=30)
    await store.set("without", "v")
    clock.advance(10)

    assert await store.ttl("with") == 20
    assert await store.ttl("without") == -1
    assert await store.ttl("missing") == -2


@pytest.mark.asyncio
async def test_expired_keys_not_listed_or_deleted(store, clock):
    """Test that expired keys are invisible to keys() and delete()."""
    await store.set("k", "v", ex=1)
    clock.advance(1)

    assert store.keys() == []
    assert await store.delete("k") == 0


# ============================================================================
# Sets
# ============================================================================


@pytest.mark.asyncio
async def test_sadd_smembers(store):
    """Test that sadd() adds members and reports how many were new."""
    assert await store.sadd("s", "a", "b") == 2
    assert await store.sadd("s", "b", "c") == 1
    assert await store.smembers("s") == {"a", "b", "c"}


@pytest.mark.asyncio
async def test_smembers_missing_is_empty(store):
    """Test that smembers() of a missing key is an empty set."""
    assert await store.smembers("missing") == set()


@pytest.mark.asyncio
async def test_smembers_returns_copy(store):
    """Test that mutating the returned set leaves the stored set alone."""
    await store.sadd("s", "a")
    members = await store.smembers("s")
    members.add("b")
    assert await store.smembers("s") == {"a"}


@pytest.mark.asyncio
async def test_srem_deletes_empty_set(store):
    """Test that removing the last member deletes the key."""
    await store.sadd("s", "a", "b")

    assert await store.srem("s", "a", "missing") == 1
    assert await store.srem("s", "b") == 1
    assert store.keys() == []
    assert await store.srem("s", "b") == 0


@pytest.mark.asyncio
async def test_set_keeps_deadline_on_sadd(store, clock):
    """Test that adding members does not clear a set's deadline."""
    await store.sadd("s", "a")
    await store.expire("s", 10)
    await store.sadd("s", "b")

    clock.advance(10)
    assert await store.smembers("s") == set()


@pytest.mark.asyncio
async def test_wrong_type(store):
    """Test that string and set commands refuse the other type."""
    await store.set("str", "v")
    await store.sadd("set", "a")

    with pytest.raises(WrongTypeError):
        await store.get("set")
    with pytest.raises(WrongTypeError):
        await store.sadd("str", "a")
    with pytest.raises(WrongTypeError):
        await store.smembers("str")


@pytest.mark.asyncio
async def test_flushdb(store):
    """Test that flushdb() removes everything."""
    await store.set("a", "1")
    await store.sadd("s", "x")
    await store.flushdb()
    assert store.keys() == []


def test_store_satisfies_protocol():
    """MemoryKeyValueStore conforms to KeyValueClient."""
    assert isinstance(MemoryKeyValueStore(), KeyValueClient)
