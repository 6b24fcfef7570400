"""Session service - orchestrates sign-in, sign-up, OTP, reset and sign-out."""

import functools
import logging

from auth.config import AuthConfig
from auth.exceptions import (
    AuthError,
    BackendError,
    IdentityTokenMissingError,
    NoTokenError,
    SessionExpiredError,
    TransportError,
)
from auth.identity import (
    AppleIdentityProvider,
    GoogleIdentityProvider,
    IdentityProvider,
    Provider,
)
from auth.security_logger import SecurityEvent, SecurityLogger
from auth.state import SessionState
from auth.token_store import TokenStore
from auth.types import (
    AuthenticatedUser,
    Session,
    SignUpResult,
    SocialSignInRequest,
    User,
)
from auth.validation import (
    validate_otp_code,
    validate_password_reset,
    validate_reset_request,
    validate_sign_in,
    validate_sign_up,
)
from clients.api_client import AuthApiClient

logger = logging.getLogger(__name__)


def auth_boundary(method):
    """Let AuthError through; log anything else and convert it to TransportError."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except AuthError:
            raise
        except Exception as e:
            logger.exception(f"Unexpected error in SessionService.{method.__name__}")
            raise TransportError() from e

    return wrapper


class SessionService:
    """Orchestrates the authentication and session lifecycle.

    Handles:
    - Password sign-in and federated (Apple/Google) sign-in
    - Sign-up, which only leads to OTP verification, never to a session
    - OTP verification and resend
    - Password reset request and completion
    - Sign-out and session restore at process start

    Every operation validates locally first and raises only AuthError
    subclasses. The token is persisted before the session is published.
    """

    def __init__(
        self,
        config: AuthConfig,
        api: AuthApiClient,
        token_store: TokenStore,
        state: SessionState,
        security_logger: SecurityLogger,
    ):
        self._config = config
        self._api = api
        self._token_store = token_store
        self._state = state
        self._security_logger = security_logger

    @classmethod
    def create(
        cls,
        config: AuthConfig,
        token_store: TokenStore,
        state: SessionState | None = None,
        security_logger: SecurityLogger | None = None,
    ) -> "SessionService":
        """Wire a service against the real HTTP API."""
        return cls(
            config=config,
            api=AuthApiClient(config),
            token_store=token_store,
            state=state or SessionState(),
            security_logger=security_logger or SecurityLogger(),
        )

    @property
    def state(self) -> SessionState:
        return self._state

    def apple_provider(self, authorize) -> AppleIdentityProvider:
        """Apple provider using the configured nonce length."""
        return AppleIdentityProvider(authorize, nonce_length=self._config.apple_nonce_length)

    # =========================================================================
    # TOKEN + STATE HELPERS
    # =========================================================================

    def _persist_token(self, session: Session, email: str | None) -> None:
        """Write the token. Failure is logged; the in-memory session stays valid."""
        try:
            stored = self._token_store.store_token(session.token)
        except Exception as e:
            logger.error(f"Token store raised while persisting session: {e}")
            stored = False

        if not stored:
            self._security_logger.log(SecurityEvent.TOKEN_STORE_FAILED, email=email)

    def _establish(self, user: User, session: Session) -> Session:
        session = session.model_copy(update={"issued_for": user.id})
        self._persist_token(session, user.email)
        self._state.establish(user, session)
        self._security_logger.log(
            SecurityEvent.SESSION_ESTABLISHED, email=user.email, user_id=user.id
        )
        return session

    # =========================================================================
    # SIGN IN
    # =========================================================================

    @auth_boundary
    def sign_in(self, email: str, password: str) -> User:
        """Sign in with email and password.

        Raises:
            ValidationError: Email lacks '@' or password too short. No network call.
            InvalidCredentialsError: Backend rejected the credentials.
            BackendError: Backend reported another failure.
            TransportError: Network or decoding failure.
        """
        email = email.strip()
        validate_sign_in(email, password, self._config)

        try:
            response = self._api.sign_in(email, password)
        except AuthError as e:
            self._security_logger.log(
                SecurityEvent.SIGN_IN_FAILED,
                email=email,
                details={"reason": type(e).__name__},
            )
            raise

        self._establish(response.user, response.session)
        self._security_logger.log(
            SecurityEvent.SIGN_IN_SUCCEEDED, email=response.user.email, user_id=response.user.id
        )
        return response.user

    def _federated_sign_in(self, request: SocialSignInRequest) -> User:
        try:
            response = self._api.social_sign_in(request)
        except AuthError as e:
            self._security_logger.log(
                SecurityEvent.FEDERATED_SIGN_IN_FAILED,
                email=request.email,
                provider=request.provider,
                details={"reason": type(e).__name__},
            )
            raise

        self._establish(response.user, response.session)
        self._security_logger.log(
            SecurityEvent.FEDERATED_SIGN_IN_SUCCEEDED,
            email=response.user.email,
            user_id=response.user.id,
            provider=request.provider,
        )
        return response.user

    @auth_boundary
    def sign_in_with_apple(
        self,
        identity_token: str | None,
        hashed_nonce: str | None,
        given_name: str | None = None,
        family_name: str | None = None,
        email: str | None = None,
    ) -> User:
        """Forward an Apple identity token and its request's nonce hash.

        Raises:
            IdentityTokenMissingError: No identity token. No network call.
        """
        if not identity_token:
            raise IdentityTokenMissingError(AppleIdentityProvider.MISSING_TOKEN_MESSAGE)

        return self._federated_sign_in(
            SocialSignInRequest(
                provider=Provider.APPLE.value,
                identity_token=identity_token,
                hashed_nonce=hashed_nonce,
                given_name=given_name,
                family_name=family_name,
                email=email,
            )
        )

    @auth_boundary
    def sign_in_with_google(
        self,
        id_token: str | None,
        access_token: str | None = None,
        given_name: str | None = None,
        family_name: str | None = None,
        email: str | None = None,
    ) -> User:
        """Forward Google's id and access tokens.

        Raises:
            IdentityTokenMissingError: No id token. No network call.
        """
        if not id_token:
            raise IdentityTokenMissingError(GoogleIdentityProvider.MISSING_TOKEN_MESSAGE)

        return self._federated_sign_in(
            SocialSignInRequest(
                provider=Provider.GOOGLE.value,
                identity_token=id_token,
                access_token=access_token,
                given_name=given_name,
                family_name=family_name,
                email=email,
            )
        )

    @auth_boundary
    def sign_in_with_provider(self, provider: IdentityProvider) -> User:
        """Run a provider's authorization, then sign in with what it returned.

        Raises:
            SignInCancelledError: User dismissed the provider prompt.
        """
        identity = provider.obtain_identity()
        profile = identity.profile

        if identity.provider is Provider.APPLE:
            return self.sign_in_with_apple(
                identity.identity_token,
                identity.hashed_nonce,
                given_name=profile.given_name,
                family_name=profile.family_name,
                email=profile.email,
            )
        return self.sign_in_with_google(
            identity.identity_token,
            identity.access_token,
            given_name=profile.given_name,
            family_name=profile.family_name,
            email=profile.email,
        )

    # =========================================================================
    # SIGN UP + OTP
    # =========================================================================

    @auth_boundary
    def sign_up(
        self,
        name: str,
        email: str,
        password: str,
        confirm_password: str,
        language: str | None = None,
    ) -> SignUpResult:
        """Create an account. The caller proceeds to OTP verification on success.

        Raises:
            ValidationError: First failing field check. No network call.
            BackendError: Backend refused (e.g. account already exists).
            TransportError: Network failure.
        """
        email = email.strip()
        validate_sign_up(name, email, password, confirm_password, self._config)
        name = name.strip()

        try:
            response = self._api.sign_up(
                email, password, name, language or self._config.default_language
            )
        except TransportError as e:
            if e.status_code is not None and 200 <= e.status_code < 300:
                # Account was created; only the body was unreadable.
                logger.warning(
                    f"Sign-up returned HTTP {e.status_code} with unreadable body, "
                    "continuing to verification"
                )
                self._security_logger.log(
                    SecurityEvent.SIGN_UP_REQUESTED,
                    email=email,
                    details={"response": "unreadable"},
                )
                return SignUpResult(email=email)
            self._security_logger.log(
                SecurityEvent.SIGN_UP_FAILED, email=email, details={"reason": "TransportError"}
            )
            raise
        except AuthError as e:
            self._security_logger.log(
                SecurityEvent.SIGN_UP_FAILED, email=email, details={"reason": type(e).__name__}
            )
            raise

        if not response.succeeded and (response.success is False or response.message):
            self._security_logger.log(
                SecurityEvent.SIGN_UP_FAILED, email=email, details={"reason": "rejected"}
            )
            raise BackendError(
                response.message or "We couldn't create your account. Please try again."
            )

        self._security_logger.log(SecurityEvent.SIGN_UP_REQUESTED, email=email)
        return SignUpResult(email=email, message=response.message)

    @auth_boundary
    def verify_otp(self, email: str, code: str) -> AuthenticatedUser:
        """Verify an emailed code and persist the issued token.

        The session is NOT published; call activate() with the result.

        Raises:
            ValidationError: Code is not exactly the configured number of digits.
            BackendError: Backend reported the code as wrong or expired.
        """
        email = email.strip()
        validate_otp_code(code, self._config)

        try:
            response = self._api.verify_otp(email, code)
        except AuthError as e:
            self._security_logger.log(
                SecurityEvent.OTP_FAILED, email=email, details={"reason": type(e).__name__}
            )
            raise

        if not response.success or response.user is None or response.session is None:
            self._security_logger.log(
                SecurityEvent.OTP_FAILED, email=email, details={"reason": "rejected"}
            )
            raise BackendError(
                response.message or "Verification failed. Please try again."
            )

        session = response.session.model_copy(update={"issued_for": response.user.id})
        self._persist_token(session, response.user.email)
        self._security_logger.log(
            SecurityEvent.OTP_VERIFIED, email=response.user.email, user_id=response.user.id
        )
        return AuthenticatedUser(user=response.user, session=session)

    @auth_boundary
    def activate(self, authenticated: AuthenticatedUser) -> None:
        """Publish a verified user and session."""
        self._state.establish(authenticated.user, authenticated.session)
        self._security_logger.log(
            SecurityEvent.SESSION_ESTABLISHED,
            email=authenticated.user.email,
            user_id=authenticated.user.id,
        )

    @auth_boundary
    def resend_otp(self, email: str) -> str:
        """Ask the backend to email a new code.

        Returns:
            The backend's confirmation message (may be empty).
        """
        email = email.strip()
        response = self._api.resend_otp(email)
        if not response.success:
            raise BackendError(
                response.message or "Failed to resend code. Please try again."
            )

        self._security_logger.log(SecurityEvent.OTP_RESENT, email=email)
        return response.message

    # =========================================================================
    # PASSWORD RESET
    # =========================================================================

    @auth_boundary
    def request_password_reset(self, email: str) -> None:
        """Email a reset code. Does not touch the current session."""
        email = email.strip()
        validate_reset_request(email)
        self._api.request_password_reset(email)
        self._security_logger.log(SecurityEvent.PASSWORD_RESET_REQUESTED, email=email)

    @auth_boundary
    def reset_password(
        self,
        email: str,
        code: str,
        new_password: str,
        confirm_password: str | None = None,
    ) -> None:
        """Set a new password with an emailed code. Caller signs in afterwards.

        Raises:
            ValidationError: Bad code, new password below the reset minimum, or
                confirmation mismatch. No network call.
        """
        email = email.strip()
        validate_password_reset(
            email, code, new_password, self._config, confirm_password=confirm_password
        )

        try:
            self._api.reset_password(email, code, new_password)
        except AuthError as e:
            self._security_logger.log(
                SecurityEvent.PASSWORD_RESET_FAILED,
                email=email,
                details={"reason": type(e).__name__},
            )
            raise

        self._security_logger.log(SecurityEvent.PASSWORD_RESET_COMPLETED, email=email)

    # =========================================================================
    # SESSION LIFECYCLE
    # =========================================================================

    @auth_boundary
    def sign_out(self) -> None:
        """Clear the persisted token and the published session."""
        user = self._state.current_user

        try:
            self._token_store.clear_token()
        except Exception as e:
            logger.error(f"Token store raised while clearing session: {e}")

        self._state.clear()
        self._security_logger.log(
            SecurityEvent.SESSION_CLEARED,
            email=user.email if user else None,
            user_id=user.id if user else None,
        )

    @auth_boundary
    def restore_session(self) -> bool:
        """Restore authenticated state from the token store at process start.

        The user snapshot is unknown until the next authenticated fetch.

        Returns:
            True if a stored token was found.
        """
        try:
            token = self._token_store.retrieve_token()
        except Exception as e:
            logger.error(f"Token store raised while restoring session: {e}")
            token = None

        if not token:
            self._state.clear()
            return False

        self._state.restore(Session(token=token))
        self._security_logger.log(SecurityEvent.SESSION_RESTORED)
        return True

    @auth_boundary
    def current_token(self) -> str:
        """Bearer token for authorized API calls.

        Raises:
            NoTokenError: Nobody is signed in.
            SessionExpiredError: Session passed its expiry; it has been cleared.
        """
        session = self._state.session
        if session is None:
            raise NoTokenError()

        if session.is_expired():
            user = self._state.current_user
            self._security_logger.log(
                SecurityEvent.SESSION_EXPIRED,
                email=user.email if user else None,
                user_id=session.issued_for,
            )
            self.sign_out()
            raise SessionExpiredError()

        return session.token

    def authorization_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.current_token()}"}
