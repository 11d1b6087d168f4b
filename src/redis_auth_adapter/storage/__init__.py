"""Key-value client backends for the auth adapter.

The adapter talks to any object satisfying the KeyValueClient protocol
defined in base.py. ``redis.asyncio.Redis`` satisfies it directly.

Available Backends:
    - redis.asyncio.Redis: production client (see RedisAuthAdapter.from_url)
    - MemoryKeyValueStore: in-process store with an injectable clock
"""

from redis_auth_adapter.storage.base import REQUIRED_CLIENT_METHODS, KeyValueClient
from redis_auth_adapter.storage.memory import MemoryKeyValueStore

__all__ = [
    "REQUIRED_CLIENT_METHODS",
    "KeyValueClient",
    "MemoryKeyValueStore",
]
