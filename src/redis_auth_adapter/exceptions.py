"""Custom exceptions for the Redis auth adapter.

Ordinary lookups never raise: a missing user, account, session or token is
reported as ``None``. Failures from the key-value client (connection errors,
timeouts, wrong-type replies) and from record decoding
(``pydantic.ValidationError``) propagate unmodified, so they are not wrapped
here either.

Examples:
    Handling a misconfigured client::

        from redis_auth_adapter.exceptions import ClientCapabilityError

        try:
            adapter = RedisAuthAdapter(client)
        except ClientCapabilityError as e:
            logger.error("Unsupported key-value client", missing=e.missing_methods)
            raise
"""


class AuthAdapterError(Exception):
    """Base exception for all adapter-specific errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        """Initialize the exception with a message.

        Args:
            message: Human-readable error description.
        """
        self.message = message
        super().__init__(message)


class ClientCapabilityError(AuthAdapterError):
    """The supplied key-value client lacks operations the adapter needs.

    Raised when the adapter is constructed, before any request is issued.

    Attributes:
        message: Human-readable error description.
        missing_methods: Names of the required methods the client lacks.

    Examples:
        Raising a capability error::

            missing = [name for name in REQUIRED_CLIENT_METHODS if not hasattr(client, name)]
            if missing:
                raise ClientCapabilityError(
                    message=f"Client {type(client).__name__} is missing {', '.join(missing)}",
                    missing_methods=missing,
                )
    """

    def __init__(self, message: str, missing_methods: list[str]) -> None:
        """Initialize the capability error with details.

        Args:
            message: Human-readable error description.
            missing_methods: Names of the required methods the client lacks.
        """
        super().__init__(message)
        self.missing_methods = missing_methods
