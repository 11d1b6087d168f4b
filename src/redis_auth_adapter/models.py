"""Domain models persisted by the Redis auth adapter.

This module provides the entities an authentication framework hands to the
adapter: users, linked provider accounts, sessions and email verification
tokens. Records are stored as JSON using camelCase field names
(``emailVerified``, ``providerAccountId``, ``userId``, ``sessionToken``) while
the Python attributes are snake_case.

Every model accepts additional fields (``extra="allow"``), so profile data and
provider-specific token fields survive a write/read cycle untouched.

Date-typed fields are declared per model (``AdapterUser.email_verified``,
``AdapterSession.expires``, ``VerificationToken.expires``). Pydantic turns their
ISO-8601 text back into ``datetime`` on every read. Declared text fields are
never reinterpreted, whatever they look like; timestamp text in extra fields
is converted when a record is decoded from the store.

Examples:
    Creating a user::

        from redis_auth_adapter.models import UserCreate

        user = UserCreate(email="ada@example.com", name="Ada")

    Creating a session::

        from datetime import UTC, datetime, timedelta
        from redis_auth_adapter.models import AdapterSession

        session = AdapterSession(
            session_token="0b8f6e2c",
            user_id="2f1e8c1a-5d0b-4d4e-9a0c-6f2b3c4d5e6f",
            expires=datetime.now(UTC) + timedelta(days=30),
        )

    Reading the stored form::

        session.model_dump_json(by_alias=True)
        # '{"sessionToken":"0b8f6e2c","userId":"2f1e...","expires":"2024-..."}'
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from redis_auth_adapter.keys import account_id


class AdapterModel(BaseModel):
    """Base class for stored records."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_record(self) -> dict[str, Any]:
        """Return the fields set on this instance keyed by alias, extras included.

        This is the shape written to the store. On a partial update it is
        exactly the set of fields to change.
        """
        changed = self.model_dump(by_alias=True, exclude_unset=True, mode="python")
        changed.update(self.model_extra or {})
        return changed


class UserCreate(AdapterModel):
    """User data supplied to create_user, before an id is assigned.

    Attributes:
        email: Email address, unique across users when present.
        email_verified: When the email address was verified.
        name: Display name.
        image: Avatar URL.
    """

    email: str | None = Field(default=None, examples=["ada@example.com"])
    email_verified: datetime | None = Field(default=None, examples=["2024-01-01T00:00:00Z"])
    name: str | None = None
    image: str | None = None


class AdapterUser(UserCreate):
    """A stored user.

    Also used as the partial update passed to update_user, where only ``id``
    is required and every field left unset keeps its stored value.
    """

    id: str = Field(..., min_length=1, examples=["9b2d5c84-0f4a-4c0a-a0f3-8f6c8d7f3a11"])


class AdapterAccount(AdapterModel):
    """Link between a user and an identity at an external provider.

    Token fields keep the snake_case names providers return them under.
    ``expires_at`` is the provider's epoch-seconds number, not a date; some
    providers send it with a fractional part. An ``id`` passed in is dropped,
    since the identifier is always derived.

    Attributes:
        user_id: Owning user.
        type: Account type, e.g. "oauth", "oidc" or "email".
        provider: Provider identifier, e.g. "github".
        provider_account_id: Identity of the user at the provider.
    """

    user_id: str
    type: str | None = None
    provider: str
    provider_account_id: str
    refresh_token: str | None = Field(default=None, alias="refresh_token")
    access_token: str | None = Field(default=None, alias="access_token")
    expires_at: int | float | None = Field(default=None, alias="expires_at")
    token_type: str | None = Field(default=None, alias="token_type")
    scope: str | None = None
    id_token: str | None = Field(default=None, alias="id_token")
    session_state: str | None = Field(default=None, alias="session_state")

    @model_validator(mode="before")
    @classmethod
    def _drop_supplied_id(cls, data: Any) -> Any:
        if isinstance(data, Mapping) and "id" in data:
            return {key: value for key, value in data.items() if key != "id"}
        return data

    @property
    def id(self) -> str:
        """Composite identifier ``<provider>:<providerAccountId>``; never stored."""
        return account_id(self.provider, self.provider_account_id)


class AdapterSession(AdapterModel):
    """An active login session."""

    session_token: str = Field(..., min_length=1)
    user_id: str
    expires: datetime


class SessionUpdate(AdapterModel):
    """Partial session passed to update_session."""

    session_token: str = Field(..., min_length=1)
    user_id: str | None = None
    expires: datetime | None = None


class VerificationToken(AdapterModel):
    """One-time token for email verification or passwordless sign in."""

    identifier: str
    token: str
    expires: datetime


class SessionAndUser(BaseModel):
    """Result of get_session_and_user."""

    session: AdapterSession
    user: AdapterUser
