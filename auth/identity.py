"""Federated identity providers.

Each provider wraps a platform authorizer callable and normalizes what it
returns into a FederatedIdentity the orchestrator can forward to the backend.
Authorizers return None when the user cancels the prompt.
"""

import logging
from enum import Enum
from typing import Callable, Protocol

from pydantic import BaseModel

from auth.exceptions import IdentityTokenMissingError, SignInCancelledError
from auth.nonce import AppleNonce

logger = logging.getLogger(__name__)


class Provider(str, Enum):
    APPLE = "apple"
    GOOGLE = "google"


class ProfileHints(BaseModel):
    """Optional profile data the provider shared with us."""

    given_name: str | None = None
    family_name: str | None = None
    email: str | None = None


class FederatedIdentity(BaseModel):
    """Provider-neutral result of a federated authorization."""

    provider: Provider
    identity_token: str
    access_token: str | None = None
    hashed_nonce: str | None = None
    profile: ProfileHints = ProfileHints()


class AppleCredential(BaseModel):
    """What the Apple authorization callback hands back."""

    identity_token: bytes | str | None = None
    given_name: str | None = None
    family_name: str | None = None
    email: str | None = None


class GoogleCredential(BaseModel):
    """What the Google sign-in callback hands back."""

    id_token: str | None = None
    access_token: str | None = None
    given_name: str | None = None
    family_name: str | None = None
    email: str | None = None


class IdentityProvider(Protocol):
    provider: Provider

    def obtain_identity(self) -> FederatedIdentity:
        """
        Run the provider's authorization and return a normalized identity.

        Raises:
            SignInCancelledError: User dismissed the prompt.
            IdentityTokenMissingError: No readable identity token.
        """
        ...


class AppleIdentityProvider:
    """Apple sign-in with a per-attempt nonce.

    The nonce pair lives from prepare_request() until complete() or cancel(),
    whichever comes first.
    """

    provider = Provider.APPLE
    MISSING_TOKEN_MESSAGE = "We couldn't verify your Apple account. Please try again."

    def __init__(
        self,
        authorize: Callable[[str], AppleCredential | None],
        nonce_length: int = 32,
    ):
        """
        Args:
            authorize: Presents the Apple prompt with the given hashed nonce and
                returns the credential, or None if the user cancelled.
            nonce_length: Characters in the raw nonce.
        """
        self._authorize = authorize
        self._nonce_length = nonce_length
        self._nonce: AppleNonce | None = None

    @property
    def pending_nonce(self) -> AppleNonce | None:
        return self._nonce

    def prepare_request(self) -> str:
        """Create a fresh nonce pair and return the hash for the Apple request."""
        self._nonce = AppleNonce.generate(self._nonce_length)
        return self._nonce.hashed

    def cancel(self) -> None:
        self._nonce = None

    def complete(self, credential: AppleCredential) -> FederatedIdentity:
        """Build the identity from Apple's credential and discard the nonce."""
        nonce, self._nonce = self._nonce, None

        token = credential.identity_token
        if isinstance(token, bytes):
            try:
                token = token.decode("utf-8")
            except UnicodeDecodeError:
                token = None
        if not token:
            raise IdentityTokenMissingError(self.MISSING_TOKEN_MESSAGE)

        return FederatedIdentity(
            provider=Provider.APPLE,
            identity_token=token,
            hashed_nonce=nonce.hashed if nonce else None,
            profile=ProfileHints(
                given_name=credential.given_name,
                family_name=credential.family_name,
                email=credential.email,
            ),
        )

    def obtain_identity(self) -> FederatedIdentity:
        hashed_nonce = self.prepare_request()
        try:
            credential = self._authorize(hashed_nonce)
        except Exception as e:
            self.cancel()
            logger.error(f"Apple authorization failed: {e}")
            raise IdentityTokenMissingError(self.MISSING_TOKEN_MESSAGE) from e

        if credential is None:
            self.cancel()
            raise SignInCancelledError()

        return self.complete(credential)


class GoogleIdentityProvider:
    """Google sign-in. The platform flow binds the token, so no nonce is needed."""

    provider = Provider.GOOGLE
    MISSING_TOKEN_MESSAGE = "We couldn't verify your Google account. Please try again."

    def __init__(self, authorize: Callable[[], GoogleCredential | None]):
        self._authorize = authorize

    def obtain_identity(self) -> FederatedIdentity:
        try:
            credential = self._authorize()
        except Exception as e:
            logger.error(f"Google sign-in failed: {e}")
            raise IdentityTokenMissingError(self.MISSING_TOKEN_MESSAGE) from e

        if credential is None:
            raise SignInCancelledError()

        if not credential.id_token:
            raise IdentityTokenMissingError(self.MISSING_TOKEN_MESSAGE)

        return FederatedIdentity(
            provider=Provider.GOOGLE,
            identity_token=credential.id_token,
            access_token=credential.access_token,
            profile=ProfileHints(
                given_name=credential.given_name,
                family_name=credential.family_name,
                email=credential.email,
            ),
        )
