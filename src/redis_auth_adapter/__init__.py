"""
Redis persistence adapter for authentication frameworks.

This package stores users, linked provider accounts, sessions and email
verification tokens in a Redis-compatible key-value store, maintaining the
secondary keys needed to look users up by email, by provider account and by
session token.
"""

from redis_auth_adapter.adapter import RedisAuthAdapter
from redis_auth_adapter.config import RedisAdapterOptions, default_options
from redis_auth_adapter.exceptions import AuthAdapterError, ClientCapabilityError
from redis_auth_adapter.models import (
    AdapterAccount,
    AdapterSession,
    AdapterUser,
    SessionAndUser,
    SessionUpdate,
    UserCreate,
    VerificationToken,
)
from redis_auth_adapter.serialization import hydrate_dates

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "RedisAuthAdapter",
    "RedisAdapterOptions",
    "default_options",
    "AuthAdapterError",
    "ClientCapabilityError",
    "AdapterAccount",
    "AdapterSession",
    "AdapterUser",
    "SessionAndUser",
    "SessionUpdate",
    "UserCreate",
    "VerificationToken",
    "hydrate_dates",
]
