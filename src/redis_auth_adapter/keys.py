"""Key naming for the Redis auth adapter.

Every entity and index lives under a fixed key name built from the configured
prefixes. The layout with default options and no base prefix is::

    user:<id>                             User record
    user:email:<email>                    user id
    user:account:<provider>:<accountId>   Account record
    user:account:by-user-id:<userId>      set of account keys
    user:session:<sessionToken>           Session record
    user:session:by-user-id:<userId>      set of session keys
    user:token:<identifier>:<token>       VerificationToken record

Composite identifiers escape ``%`` and ``:`` in each component before joining
them with ``:``, so two different (provider, account id) pairs can never map to
the same key. Components containing neither character are left untouched.
"""

from redis_auth_adapter.config import RedisAdapterOptions

COMPOSITE_SEPARATOR = ":"


def escape_component(value: str) -> str:
    """Escape one component of a composite identifier.

    Example:
        >>> escape_component("urn:example")
        'urn%3Aexample'
    """
    return value.replace("%", "%25").replace(COMPOSITE_SEPARATOR, "%3A")


def composite_id(*parts: str) -> str:
    """Join identifier parts into an unambiguous composite identifier.

    Example:
        >>> composite_id("github", "42")
        'github:42'
        >>> composite_id("a:b", "c")
        'a%3Ab:c'
    """
    return COMPOSITE_SEPARATOR.join(escape_component(str(part)) for part in parts)


def account_id(provider: str, provider_account_id: str) -> str:
    """Derive the Account identifier ``<provider>:<providerAccountId>``."""
    return composite_id(provider, provider_account_id)


class KeySpace:
    """Resolved key prefixes for one adapter instance.

    Attributes:
        account_prefix: Prefix of Account records, base prefix included.
        account_by_user_prefix: Prefix of per-user account sets.
        email_prefix: Prefix of email pointers.
        session_prefix: Prefix of Session records.
        session_by_user_prefix: Prefix of per-user session sets.
        user_prefix: Prefix of User records.
        verification_token_prefix: Prefix of VerificationToken records.
    """

    def __init__(self, options: RedisAdapterOptions) -> None:
        base = options.base_key_prefix
        self.account_prefix = base + options.account_key_prefix
        self.account_by_user_prefix = base + options.account_by_user_id_prefix
        self.email_prefix = base + options.email_key_prefix
        self.session_prefix = base + options.session_key_prefix
        self.session_by_user_prefix = base + options.session_by_user_id_key_prefix
        self.user_prefix = base + options.user_key_prefix
        self.verification_token_prefix = base + options.verification_token_key_prefix

    def user(self, user_id: str) -> str:
        return self.user_prefix + user_id

    def email(self, email: str) -> str:
        return self.email_prefix + email

    def account(self, provider: str, provider_account_id: str) -> str:
        return self.account_prefix + account_id(provider, provider_account_id)

    def accounts_by_user(self, user_id: str) -> str:
        return self.account_by_user_prefix + user_id

    def session(self, session_token: str) -> str:
        return self.session_prefix + session_token

    def sessions_by_user(self, user_id: str) -> str:
        return self.session_by_user_prefix + user_id

    def verification_token(self, identifier: str, token: str) -> str:
        return self.verification_token_prefix + composite_id(identifier, token)
