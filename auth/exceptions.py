"""Typed exceptions for auth failures.

Every orchestrator operation raises only these. Each carries the text that is
safe to show a user in `user_message`.
"""

GENERIC_RETRY_MESSAGE = "An unexpected error occurred. Please try again."
INVALID_CREDENTIALS_MESSAGE = (
    "Invalid email or password. Please check your credentials and try again."
)


class AuthError(Exception):
    """Base class for authentication errors."""

    def __init__(self, user_message: str = GENERIC_RETRY_MESSAGE):
        self.user_message = user_message
        super().__init__(user_message)


class ValidationError(AuthError):
    """
    Local input check failed before any network call.

    Deterministic: the same input always produces the same message.
    """


class IdentityTokenMissingError(ValidationError):
    """Federated flow could not obtain a readable provider identity token."""


class SignInCancelledError(AuthError):
    """User dismissed a federated sign-in prompt. Not shown as an error."""

    def __init__(self, user_message: str = ""):
        super().__init__(user_message)


class BackendError(AuthError):
    """Backend rejected the request. Message is displayed verbatim."""

    def __init__(self, user_message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(user_message)


class InvalidCredentialsError(BackendError):
    """Backend answered 401 to a credential check."""

    def __init__(self, user_message: str = INVALID_CREDENTIALS_MESSAGE):
        super().__init__(user_message, status_code=401)


class TransportError(AuthError):
    """
    Network failure, timeout, or undecodable response.

    The user sees a generic retry message; the cause is chained and logged.
    `status_code` is set when an HTTP response was received but could not be read.
    """

    def __init__(
        self,
        user_message: str = GENERIC_RETRY_MESSAGE,
        status_code: int | None = None,
    ):
        self.status_code = status_code
        super().__init__(user_message)


class NoTokenError(AuthError):
    """No session token is available. User must sign in again."""

    def __init__(
        self, user_message: str = "No authentication token found. Please sign in again."
    ):
        super().__init__(user_message)


class SessionExpiredError(AuthError):
    """Session passed its expiry and was cleared."""

    def __init__(
        self, user_message: str = "Your session has expired. Please sign in again."
    ):
        super().__init__(user_message)
