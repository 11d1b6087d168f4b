"""Unit tests for domain models."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from redis_auth_adapter.models import (
    AdapterAccount,
    AdapterSession,
    AdapterUser,
    SessionUpdate,
    UserCreate,
    VerificationToken,
)


class TestAliases:
    """Records are keyed by camelCase aliases and accept either spelling."""

    def test_user_accepts_alias_and_name(self) -> None:
        verified = datetime(2024, 1, 1, tzinfo=UTC)
        by_alias = AdapterUser.model_validate({"id": "u1", "emailVerified": verified})
        by_name = AdapterUser(id="u1", email_verified=verified)

        assert by_alias == by_name
        assert by_alias.to_record()["emailVerified"] == verified

    def test_account_token_fields_keep_snake_case(self) -> None:
        account = AdapterAccount(
            user_id="u1",
            provider="github",
            provider_account_id="42",
            access_token="tok",
            expires_at=1700000000,
        )
        record = account.to_record()

        assert record["providerAccountId"] == "42"
        assert record["userId"] == "u1"
        assert record["access_token"] == "tok"
        assert record["expires_at"] == 1700000000
        assert "accessToken" not in record

    def test_account_expires_at_accepts_fractional_seconds(self) -> None:
        account = AdapterAccount(
            user_id="u1", provider="github", provider_account_id="42", expires_at=1700000000.5
        )
        assert account.expires_at == 1700000000.5
        assert account.to_record()["expires_at"] == 1700000000.5


class TestDateFields:
    """Declared date fields are parsed from ISO text; nothing else is."""

    def test_session_expires_parsed(self) -> None:
        session = AdapterSession.model_validate_json(
            '{"sessionToken": "t", "userId": "u", "expires": "2030-01-01T00:00:00.000Z"}'
        )
        assert session.expires == datetime(2030, 1, 1, tzinfo=UTC)

    def test_verification_token_expires_parsed(self) -> None:
        token = VerificationToken.model_validate_json(
            '{"identifier": "a@b.com", "token": "t", "expires": "2030-01-01T00:00:00+00:00"}'
        )
        assert token.expires == datetime(2030, 1, 1, tzinfo=UTC)

    def test_extra_timestamp_text_not_parsed(self) -> None:
        user = AdapterUser.model_validate_json(
            '{"id": "u1", "lastSeen": "2030-01-01T00:00:00.000Z"}'
        )
        assert user.model_extra == {"lastSeen": "2030-01-01T00:00:00.000Z"}


class TestAccountId:
    """The composite account id is derived from provider and account id."""

    def test_account_id(self) -> None:
        account = AdapterAccount(user_id="u1", provider="github", provider_account_id="42")
        assert account.id == "github:42"
        assert "id" not in account.to_record()

    def test_supplied_id_dropped(self) -> None:
        account = AdapterAccount.model_validate(
            {"id": "other:1", "userId": "u1", "provider": "github", "providerAccountId": "42"}
        )
        assert account.id == "github:42"
        assert account.model_extra == {}
        assert "id" not in account.to_record()

    def test_account_id_escapes_separator(self) -> None:
        account = AdapterAccount(user_id="u1", provider="urn:x", provider_account_id="42")
        assert account.id == "urn%3Ax:42"


class TestPartialModels:
    """Partial update models report only what the caller set."""

    def test_to_record_only_set_values(self) -> None:
        update = AdapterUser(id="u1", name="Ada")
        assert update.to_record() == {"id": "u1", "name": "Ada"}

    def test_to_record_includes_extras(self) -> None:
        update = AdapterUser.model_validate({"id": "u1", "locale": "fr"})
        assert update.to_record() == {"id": "u1", "locale": "fr"}

    def test_session_update_requires_token(self) -> None:
        with pytest.raises(ValidationError):
            SessionUpdate.model_validate({"userId": "u1"})

    def test_session_update_partial(self) -> None:
        update = SessionUpdate(session_token="t", expires=datetime(2030, 1, 1, tzinfo=UTC))
        assert update.to_record() == {
            "sessionToken": "t",
            "expires": datetime(2030, 1, 1, tzinfo=UTC),
        }


class TestRequiredFields:
    """Required fields are enforced when decoding."""

    def test_user_requires_id(self) -> None:
        with pytest.raises(ValidationError):
            AdapterUser.model_validate({"email": "a@b.com"})

    def test_user_create_has_no_required_fields(self) -> None:
        assert UserCreate().email is None

    def test_session_requires_expires(self) -> None:
        with pytest.raises(ValidationError):
            AdapterSession.model_validate({"sessionToken": "t", "userId": "u"})
