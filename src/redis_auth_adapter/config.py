"""Configuration module for the Redis auth adapter.

This module provides the RedisAdapterOptions class for configuring key naming
and the optional sliding time-to-live applied to every key the adapter manages.

Example:
    Basic usage with defaults:

        >>> options = RedisAdapterOptions()
        >>> options.user_key_prefix
        'user:'

    Multi-tenant prefix and sliding TTL:

        >>> options = RedisAdapterOptions(
        ...     base_key_prefix="tenant-a:",
        ...     session_key_ttl_seconds=3600,
        ... )

    Loading from environment:

        >>> import os
        >>> os.environ['AUTH_REDIS_BASE_KEY_PREFIX'] = 'myapp:'
        >>> os.environ['AUTH_REDIS_SESSION_KEY_TTL_SECONDS'] = '86400'
        >>> options = RedisAdapterOptions.from_env()

    Loading from dictionary:

        >>> options = RedisAdapterOptions.from_dict({'base_key_prefix': 'myapp:'})
"""

import os
from typing import Any

from pydantic import BaseModel, Field, field_validator

DEFAULT_KEY_PREFIXES: dict[str, str] = {
    "account_key_prefix": "user:account:",
    "account_by_user_id_prefix": "user:account:by-user-id:",
    "email_key_prefix": "user:email:",
    "session_key_prefix": "user:session:",
    "session_by_user_id_key_prefix": "user:session:by-user-id:",
    "user_key_prefix": "user:",
    "verification_token_key_prefix": "user:token:",
}


def default_options() -> dict[str, Any]:
    """Return the default option values as a plain dictionary.

    Example:
        >>> default_options()["email_key_prefix"]
        'user:email:'
    """
    return {"base_key_prefix": "", **DEFAULT_KEY_PREFIXES, "session_key_ttl_seconds": None}


class RedisAdapterOptions(BaseModel):
    """Options for the Redis auth adapter.

    Every key the adapter writes is ``base_key_prefix`` followed by the
    category prefix and the entity identifier. Operators rely on these names
    when inspecting the store, so the defaults are part of the public contract.

    Attributes:
        base_key_prefix: Prefix applied in front of every category prefix.
            Used to isolate tenants or applications sharing one store.
        account_key_prefix: Prefix of Account primary records.
        account_by_user_id_prefix: Prefix of the per-user set of account keys.
        email_key_prefix: Prefix of the email to user id pointer.
        session_key_prefix: Prefix of Session primary records.
        session_by_user_id_key_prefix: Prefix of the per-user set of session keys.
        user_key_prefix: Prefix of User primary records.
        verification_token_key_prefix: Prefix of VerificationToken records.
        session_key_ttl_seconds: Sliding expiration in seconds. When set, every
            write carries this TTL and every read hit resets it. None disables
            expiry entirely.

    Note:
        This class is immutable (frozen=True). Create a new instance if you
        need different settings.
    """

    base_key_prefix: str = Field(default="", description="Prefix applied to every key")
    account_key_prefix: str = Field(
        default=DEFAULT_KEY_PREFIXES["account_key_prefix"],
        description="Prefix for account records",
    )
    account_by_user_id_prefix: str = Field(
        default=DEFAULT_KEY_PREFIXES["account_by_user_id_prefix"],
        description="Prefix for the per-user account index",
    )
    email_key_prefix: str = Field(
        default=DEFAULT_KEY_PREFIXES["email_key_prefix"],
        description="Prefix for the email index",
    )
    session_key_prefix: str = Field(
        default=DEFAULT_KEY_PREFIXES["session_key_prefix"],
        description="Prefix for session records",
    )
    session_by_user_id_key_prefix: str = Field(
        default=DEFAULT_KEY_PREFIXES["session_by_user_id_key_prefix"],
        description="Prefix for the per-user session index",
    )
    user_key_prefix: str = Field(
        default=DEFAULT_KEY_PREFIXES["user_key_prefix"],
        description="Prefix for user records",
    )
    verification_token_key_prefix: str = Field(
        default=DEFAULT_KEY_PREFIXES["verification_token_key_prefix"],
        description="Prefix for verification token records",
    )
    session_key_ttl_seconds: int | None = Field(
        default=None,
        description="Sliding TTL in seconds applied to every managed key (None=never expire)",
    )

    model_config = {"frozen": True}

    @field_validator("session_key_ttl_seconds")
    @classmethod
    def validate_session_key_ttl_seconds(cls, v: int | None) -> int | None:
        """Validate the TTL is a positive number of seconds.

        Args:
            v: TTL value in seconds, or None.

        Returns:
            Validated TTL value.

        Raises:
            ValueError: If TTL is zero or negative.
        """
        if v is not None and v < 1:
            raise ValueError(f"session_key_ttl_seconds must be >= 1, got {v}")
        return v

    @classmethod
    def from_env(cls, prefix: str = "AUTH_REDIS_") -> "RedisAdapterOptions":
        """Create options from environment variables.

        Variable names are the upper-cased field names with ``prefix``.
        An empty ``<prefix>SESSION_KEY_TTL_SECONDS`` leaves expiry disabled.

        Args:
            prefix: Prefix for environment variable names. Default is "AUTH_REDIS_".

        Returns:
            RedisAdapterOptions populated from environment variables.

        Example:
            >>> import os
            >>> os.environ['AUTH_REDIS_USER_KEY_PREFIX'] = 'member:'
            >>> RedisAdapterOptions.from_env().user_key_prefix
            'member:'
        """
        config_dict: dict[str, Any] = {}

        for field_name in cls.model_fields:
            env_value = os.environ.get(f"{prefix}{field_name.upper()}")
            if env_value is None:
                continue
            if field_name == "session_key_ttl_seconds":
                config_dict[field_name] = int(env_value) if env_value.strip() else None
            else:
                config_dict[field_name] = env_value

        return cls(**config_dict)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "RedisAdapterOptions":
        """Create options from a dictionary.

        Raises:
            ValidationError: If the dictionary contains invalid values.
        """
        return cls(**config_dict)
