"""
Pytest configuration and shared fixtures for redis_auth_adapter tests.
"""

from datetime import UTC, datetime, timedelta

import pytest

from redis_auth_adapter.adapter import RedisAuthAdapter
from redis_auth_adapter.storage.memory import MemoryKeyValueStore


class FakeClock:
    """Manually advanced clock for MemoryKeyValueStore."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """Provide a clock starting at zero."""
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> MemoryKeyValueStore:
    """Provide an empty in-memory store driven by the fake clock."""
    return MemoryKeyValueStore(clock=clock)


@pytest.fixture
def adapter(store: MemoryKeyValueStore) -> RedisAuthAdapter:
    """Provide an adapter with a tenant prefix and no TTL."""
    return RedisAuthAdapter(store, base_key_prefix="testApp:")


@pytest.fixture
def ttl_adapter(store: MemoryKeyValueStore) -> RedisAuthAdapter:
    """Provide an adapter with a 60 second sliding TTL."""
    return RedisAuthAdapter(store, base_key_prefix="testApp:", session_key_ttl_seconds=60)


@pytest.fixture
def expires() -> datetime:
    """Provide a future, microsecond-precise expiry timestamp."""
    return datetime(2030, 5, 17, 12, 30, 45, 123456, tzinfo=UTC)


@pytest.fixture
def sample_user_data() -> dict:
    """Provide user fields as an authentication framework sends them."""
    return {
        "email": "ada@example.com",
        "emailVerified": datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC),
        "name": "Ada Lovelace",
        "image": "https://example.com/ada.png",
    }


@pytest.fixture
def sample_account_data() -> dict:
    """Provide OAuth account fields minus the owning user id."""
    return {
        "type": "oauth",
        "provider": "github",
        "providerAccountId": "42",
        "access_token": "gho_abc",
        "token_type": "bearer",
        "scope": "read:user",
        "expires_at": int((datetime(2030, 1, 1, tzinfo=UTC) + timedelta(hours=1)).timestamp()),
    }
