"""Authentication and session modules.

SessionService (auth.service) and OtpVerificationController (auth.otp) depend on
clients.api_client and are imported from their modules directly.
"""

from auth.exceptions import (
    AuthError,
    ValidationError,
    IdentityTokenMissingError,
    SignInCancelledError,
    BackendError,
    InvalidCredentialsError,
    TransportError,
    NoTokenError,
    SessionExpiredError,
)
from auth.types import (
    User,
    Session,
    AuthenticatedUser,
    AttemptState,
    AttemptStatus,
    OtpResendState,
    SessionSnapshot,
    SignUpResult,
)
from auth.config import AuthConfig, ApiEndpoints
from auth.state import SessionState
from auth.attempt import AuthAttempt
from auth.nonce import AppleNonce, random_nonce, sha256_hex
from auth.identity import (
    Provider,
    FederatedIdentity,
    IdentityProvider,
    AppleIdentityProvider,
    GoogleIdentityProvider,
    AppleCredential,
    GoogleCredential,
)
from auth.token_store import TokenStore, VaultTokenStore, MemoryTokenStore
from auth.security_logger import SecurityLogger, SecurityEvent
