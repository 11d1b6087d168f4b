"""Redis adapter persisting authentication users, accounts, sessions and tokens.

This module provides RedisAuthAdapter, a stateless facade that maps the
operations of an authentication framework onto a key-value store. Each entity
lives as a JSON record under its primary key; secondary keys emulate the
indexed lookups a relational store would offer:

    - ``user:email:<email>`` holds the id of the user owning an email
    - ``user:account:by-user-id:<userId>`` is a set of the user's account keys
    - ``user:session:by-user-id:<userId>`` is a set of the user's session keys

Consistency:
    Every call is an independent request. Multi-step operations are not
    atomic and concurrent writers to the same entity follow last-writer-wins.
    Primary records are written before their index entries, and lookups that
    hit an index entry whose record is gone remove that entry.

Sliding TTL:
    With ``session_key_ttl_seconds`` configured, every write carries the TTL
    and every read hit resets it on the key that was read. Resets run as
    background tasks the read does not wait for; a failed reset is logged and
    counted, never raised. ``wait_for_pending_refreshes`` drains them.

Examples:
    Connecting to Redis::

        from redis_auth_adapter import RedisAuthAdapter

        adapter = RedisAuthAdapter.from_url(
            "redis://localhost:6379/0",
            base_key_prefix="myapp:",
            session_key_ttl_seconds=30 * 24 * 3600,
        )

    Signing a user in::

        user = await adapter.create_user({"email": "ada@example.com"})
        await adapter.link_account(
            {
                "userId": user.id,
                "type": "oauth",
                "provider": "github",
                "providerAccountId": "42",
            }
        )
        session = await adapter.create_session(
            {"sessionToken": token, "userId": user.id, "expires": expires}
        )

        result = await adapter.get_session_and_user(token)
        if result is None:
            ...  # signed out or expired
"""

import asyncio
import uuid
from collections.abc import Mapping
from functools import partial
from typing import Any, TypeVar

import redis.asyncio as redis
from pydantic import BaseModel

from redis_auth_adapter.config import RedisAdapterOptions
from redis_auth_adapter.exceptions import ClientCapabilityError
from redis_auth_adapter.keys import KeySpace
from redis_auth_adapter.models import (
    AdapterAccount,
    AdapterModel,
    AdapterSession,
    AdapterUser,
    SessionAndUser,
    SessionUpdate,
    UserCreate,
    VerificationToken,
)
from redis_auth_adapter.observability.logging import get_logger
from redis_auth_adapter.observability.metrics import (
    record_index_repair,
    record_operation,
    record_ttl_refresh_failure,
)
from redis_auth_adapter.serialization import decode_record, encode_record, to_text
from redis_auth_adapter.storage.base import REQUIRED_CLIENT_METHODS, KeyValueClient

ModelT = TypeVar("ModelT", bound=AdapterModel)

logger = get_logger(__name__)


def _coerce(model_cls: type[ModelT], value: Any) -> ModelT:
    """Validate a mapping or another model into ``model_cls``."""
    if isinstance(value, model_cls):
        return value
    if isinstance(value, BaseModel):
        value = value.model_dump(by_alias=True, exclude_unset=True)
    return model_cls.model_validate(value)


def _resolve_options(
    options: RedisAdapterOptions | Mapping[str, Any] | None,
    overrides: dict[str, Any],
) -> RedisAdapterOptions:
    if options is None:
        return RedisAdapterOptions(**overrides)
    if isinstance(options, RedisAdapterOptions):
        if not overrides:
            return options
        return RedisAdapterOptions(**{**options.model_dump(), **overrides})
    return RedisAdapterOptions.from_dict({**options, **overrides})


class RedisAuthAdapter:
    """Authentication persistence adapter over a Redis-compatible client.

    Not-found is always reported as ``None``. Errors raised by the client
    propagate unmodified.

    Attributes:
        options: The resolved, immutable adapter options.
        keys: Key naming for this adapter's prefixes.
    """

    def __init__(
        self,
        client: KeyValueClient,
        options: RedisAdapterOptions | Mapping[str, Any] | None = None,
        **overrides: Any,
    ) -> None:
        """Create an adapter over ``client``.

        Args:
            client: Key-value client, e.g. ``redis.asyncio.Redis`` created
                with ``decode_responses=True``.
            options: Options instance or mapping of option values.
            **overrides: Individual option values applied on top of ``options``.

        Raises:
            ClientCapabilityError: If ``client`` lacks a required method.
            ValidationError: If the options are invalid.
        """
        missing = [name for name in REQUIRED_CLIENT_METHODS if not callable(getattr(client, name, None))]
        if missing:
            raise ClientCapabilityError(
                message=f"Client {type(client).__name__} is missing {', '.join(missing)}",
                missing_methods=missing,
            )

        self.options = _resolve_options(options, overrides)
        self.keys = KeySpace(self.options)
        self._client = client
        self._ttl = self.options.session_key_ttl_seconds
        self._pending_refreshes: set[asyncio.Future[Any]] = set()

        logger.debug(
            "adapter.created",
            key_prefix=self.options.base_key_prefix,
            ttl_seconds=self._ttl,
        )

    @classmethod
    def from_url(
        cls,
        url: str,
        options: RedisAdapterOptions | Mapping[str, Any] | None = None,
        **overrides: Any,
    ) -> "RedisAuthAdapter":
        """Create an adapter on a new ``redis.asyncio`` client for ``url``.

        Example:
            >>> adapter = RedisAuthAdapter.from_url("redis://localhost:6379/0")
        """
        client = redis.from_url(url, decode_responses=True)
        return cls(client, options, **overrides)

    # ------------------------------------------------------------------
    # Store primitives
    # ------------------------------------------------------------------

    async def _write(self, key: str, value: str) -> None:
        await self._client.set(key, value, ex=self._ttl)

    async def _index_add(self, index_key: str, member: str) -> None:
        await self._client.sadd(index_key, member)
        if self._ttl:
            await self._client.expire(index_key, self._ttl)

    async def _read_text(self, key: str) -> str | None:
        raw = await self._client.get(key)
        if raw is None:
            return None
        self._touch(key)
        return to_text(raw)

    async def _read_record(self, key: str, model_cls: type[ModelT]) -> ModelT | None:
        raw = await self._read_text(key)
        if raw is None:
            return None
        return decode_record(model_cls, raw)

    async def _index_members(self, index_key: str) -> list[str]:
        members = await self._client.smembers(index_key)
        if members:
            self._touch(index_key)
        return sorted(to_text(member) for member in members)

    async def _repair(self, index: str, index_key: str, member: str | None = None) -> None:
        if member is None:
            await self._client.delete(index_key)
        else:
            await self._client.srem(index_key, member)
        record_index_repair(index)
        logger.info("index.repaired", index=index, key=index_key, member=member)

    def _touch(self, key: str) -> None:
        """Reset the TTL of ``key`` in the background."""
        if not self._ttl:
            return
        task = asyncio.ensure_future(self._client.expire(key, self._ttl))
        self._pending_refreshes.add(task)
        task.add_done_callback(partial(self._refresh_done, key))

    def _refresh_done(self, key: str, task: "asyncio.Future[Any]") -> None:
        self._pending_refreshes.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            record_ttl_refresh_failure()
            logger.warning("ttl_refresh.failed", key=key, error=repr(exc))

    async def wait_for_pending_refreshes(self) -> None:
        """Wait until every background TTL refresh has finished.

        Failed refreshes are already logged; they are not raised here.
        """
        while self._pending_refreshes:
            await asyncio.gather(*self._pending_refreshes, return_exceptions=True)

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def _set_user(self, user: AdapterUser) -> AdapterUser:
        await self._write(self.keys.user(user.id), encode_record(user))
        if user.email:
            await self._write(self.keys.email(user.email), user.id)
        return user

    async def create_user(self, user: UserCreate | Mapping[str, Any]) -> AdapterUser:
        """Store a new user under a freshly generated id.

        Any id present in ``user`` is replaced.

        Returns:
            The stored user, including its id.
        """
        data = _coerce(UserCreate, user).to_record()
        stored = await self._set_user(AdapterUser.model_validate({**data, "id": str(uuid.uuid4())}))
        record_operation("create_user", "ok")
        return stored

    async def get_user(self, user_id: str) -> AdapterUser | None:
        """Return the user with ``user_id`` or None."""
        user = await self._read_record(self.keys.user(user_id), AdapterUser)
        record_operation("get_user", "hit" if user is not None else "miss")
        return user

    async def get_user_by_email(self, email: str) -> AdapterUser | None:
        """Return the user owning ``email`` or None.

        A pointer to a user that no longer exists, or no longer has this
        email, is removed.
        """
        email_key = self.keys.email(email)
        user_id = await self._read_text(email_key)
        if user_id is None:
            record_operation("get_user_by_email", "miss")
            return None

        user = await self.get_user(user_id)
        if user is None or user.email != email:
            await self._repair("email", email_key)
            record_operation("get_user_by_email", "miss")
            return None

        record_operation("get_user_by_email", "hit")
        return user

    async def get_user_by_account(self, provider: str, provider_account_id: str) -> AdapterUser | None:
        """Return the user linked to the provider identity, or None."""
        account = await self.get_account(provider, provider_account_id)
        if account is None:
            return None
        return await self.get_user(account.user_id)

    async def update_user(self, updates: AdapterUser | Mapping[str, Any]) -> AdapterUser:
        """Shallow-merge ``updates`` into the stored user and write it back.

        Only the fields set on ``updates`` change. An unknown id is merged
        against an empty record. When the email changes, the old email
        pointer is removed.

        Returns:
            The merged user.
        """
        changes = _coerce(AdapterUser, updates)
        existing = await self._read_record(self.keys.user(changes.id), AdapterUser)
        base = existing.to_record() if existing is not None else {}
        merged = AdapterUser.model_validate({**base, **changes.to_record()})

        if existing is not None and existing.email and existing.email != merged.email:
            await self._client.delete(self.keys.email(existing.email))

        stored = await self._set_user(merged)
        record_operation("update_user", "ok")
        return stored

    async def delete_user(self, user_id: str) -> None:
        """Delete a user together with every account and session it owns.

        All keys go out in one ``delete`` call. Does nothing when the user
        does not exist.
        """
        user = await self._read_record(self.keys.user(user_id), AdapterUser)
        if user is None:
            record_operation("delete_user", "miss")
            return

        accounts_key = self.keys.accounts_by_user(user_id)
        sessions_key = self.keys.sessions_by_user(user_id)
        doomed = [self.keys.user(user_id)]
        if user.email:
            doomed.append(self.keys.email(user.email))
        doomed.extend(await self._index_members(accounts_key))
        doomed.append(accounts_key)
        doomed.extend(await self._index_members(sessions_key))
        doomed.append(sessions_key)

        removed = await self._client.delete(*doomed)
        record_operation("delete_user", "ok")
        logger.debug("user.deleted", user_id=user_id, keys=len(doomed), removed=removed)

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    async def link_account(self, account: AdapterAccount | Mapping[str, Any]) -> AdapterAccount:
        """Store an account and add it to its user's account index.

        Returns:
            The stored account.
        """
        account = _coerce(AdapterAccount, account)
        account_key = self.keys.account(account.provider, account.provider_account_id)
        await self._write(account_key, encode_record(account))
        await self._index_add(self.keys.accounts_by_user(account.user_id), account_key)
        record_operation("link_account", "ok")
        return account

    async def get_account(self, provider: str, provider_account_id: str) -> AdapterAccount | None:
        """Return the account for the provider identity, or None."""
        account = await self._read_record(self.keys.account(provider, provider_account_id), AdapterAccount)
        record_operation("get_account", "hit" if account is not None else "miss")
        return account

    async def get_accounts_for_user(self, user_id: str) -> list[AdapterAccount]:
        """Return every account linked to ``user_id``, ordered by key."""
        index_key = self.keys.accounts_by_user(user_id)
        accounts = []
        for account_key in await self._index_members(index_key):
            account = await self._read_record(account_key, AdapterAccount)
            if account is None or account.user_id != user_id:
                await self._repair("accounts_by_user", index_key, account_key)
                continue
            accounts.append(account)
        return accounts

    async def unlink_account(self, provider: str, provider_account_id: str) -> None:
        """Delete an account and drop it from its user's account index.

        Does nothing when the account does not exist.
        """
        account_key = self.keys.account(provider, provider_account_id)
        account = await self._read_record(account_key, AdapterAccount)
        if account is None:
            record_operation("unlink_account", "miss")
            return

        await self._client.delete(account_key)
        await self._client.srem(self.keys.accounts_by_user(account.user_id), account_key)
        record_operation("unlink_account", "ok")

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    async def _set_session(self, session: AdapterSession) -> AdapterSession:
        session_key = self.keys.session(session.session_token)
        await self._write(session_key, encode_record(session))
        await self._index_add(self.keys.sessions_by_user(session.user_id), session_key)
        return session

    async def create_session(self, session: AdapterSession | Mapping[str, Any]) -> AdapterSession:
        """Store a session and add it to its user's session index."""
        stored = await self._set_session(_coerce(AdapterSession, session))
        record_operation("create_session", "ok")
        return stored

    async def get_session_and_user(self, session_token: str) -> SessionAndUser | None:
        """Return the session and its user, or None if either is missing."""
        session = await self._read_record(self.keys.session(session_token), AdapterSession)
        if session is None:
            record_operation("get_session_and_user", "miss")
            return None

        user = await self.get_user(session.user_id)
        if user is None:
            record_operation("get_session_and_user", "miss")
            return None

        record_operation("get_session_and_user", "hit")
        return SessionAndUser(session=session, user=user)

    async def get_sessions_for_user(self, user_id: str) -> list[AdapterSession]:
        """Return every session of ``user_id``, ordered by key."""
        index_key = self.keys.sessions_by_user(user_id)
        sessions = []
        for session_key in await self._index_members(index_key):
            session = await self._read_record(session_key, AdapterSession)
            if session is None or session.user_id != user_id:
                await self._repair("sessions_by_user", index_key, session_key)
                continue
            sessions.append(session)
        return sessions

    async def update_session(
        self, updates: SessionUpdate | AdapterSession | Mapping[str, Any]
    ) -> AdapterSession | None:
        """Shallow-merge ``updates`` into the stored session.

        Returns:
            The merged session, or None when no session has that token.
        """
        changes = _coerce(SessionUpdate, updates)
        existing = await self._read_record(self.keys.session(changes.session_token), AdapterSession)
        if existing is None:
            record_operation("update_session", "miss")
            return None

        merged = AdapterSession.model_validate({**existing.to_record(), **changes.to_record()})
        if merged.user_id != existing.user_id:
            await self._client.srem(
                self.keys.sessions_by_user(existing.user_id),
                self.keys.session(existing.session_token),
            )

        stored = await self._set_session(merged)
        record_operation("update_session", "ok")
        return stored

    async def delete_session(self, session_token: str) -> AdapterSession | None:
        """Delete a session and drop it from its user's session index.

        Returns:
            The deleted session, or None when it did not exist.
        """
        session_key = self.keys.session(session_token)
        session = await self._read_record(session_key, AdapterSession)
        await self._client.delete(session_key)
        if session is None:
            record_operation("delete_session", "miss")
            return None

        await self._client.srem(self.keys.sessions_by_user(session.user_id), session_key)
        record_operation("delete_session", "ok")
        return session

    # ------------------------------------------------------------------
    # Verification tokens
    # ------------------------------------------------------------------

    async def create_verification_token(
        self, verification_token: VerificationToken | Mapping[str, Any]
    ) -> VerificationToken:
        """Store a one-time verification token."""
        verification_token = _coerce(VerificationToken, verification_token)
        await self._write(
            self.keys.verification_token(verification_token.identifier, verification_token.token),
            encode_record(verification_token),
        )
        record_operation("create_verification_token", "ok")
        return verification_token

    async def use_verification_token(self, identifier: str, token: str) -> VerificationToken | None:
        """Consume a verification token.

        Only the caller whose delete actually removed the key gets the token
        back, so a token is handed out at most once.

        Returns:
            The token, or None when it does not exist or was already used.
        """
        token_key = self.keys.verification_token(identifier, token)
        raw = await self._client.get(token_key)
        if raw is None or not await self._client.delete(token_key):
            record_operation("use_verification_token", "miss")
            return None

        record_operation("use_verification_token", "hit")
        return decode_record(VerificationToken, to_text(raw))
