"""Pydantic models for auth domain.

Wire models use camelCase aliases to match the backend JSON and accept
snake_case names when constructed in Python.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    WrapValidator,
    field_validator,
)
from pydantic.alias_generators import to_camel

from utils.timezone import now_utc


class WireModel(BaseModel):
    """Base for models exchanged with the backend."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        """JSON-ready dict with camelCase keys and unset optionals dropped."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def _lenient_timestamp(value, handler):
    """Aware UTC datetime, or None when the backend value is unparseable or naive."""
    try:
        parsed = handler(value)
    except ValidationError:
        return None
    if parsed is None or parsed.tzinfo is None:
        return None
    return parsed.astimezone(timezone.utc)


Timestamp = Annotated[datetime | None, WrapValidator(_lenient_timestamp)]


class User(WireModel):
    """Backend user snapshot. Replaced wholesale, never mutated locally."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    id: str
    email: str
    name: str
    image: str | None = None
    email_verified: bool = False
    created_at: Timestamp = None
    updated_at: Timestamp = None
    role: str = "user"
    prompt_enhancement_enabled: bool = True

    @field_validator("role", mode="before")
    @classmethod
    def default_role(cls, value):
        return "user" if value is None else value

    @field_validator("prompt_enhancement_enabled", mode="before")
    @classmethod
    def default_prompt_enhancement(cls, value):
        return True if value is None else value


class Session(WireModel):
    """An active session issued by the backend."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    token: str = Field(..., min_length=1, description="Session token (opaque string)")
    id: str | None = None
    expires_at: Timestamp = None
    issued_for: str | None = Field(default=None, description="User id")

    def is_expired(self, now: datetime | None = None) -> bool:
        """True when the backend-reported expiry has passed. Unknown expiry never expires."""
        if self.expires_at is None:
            return False
        return (now or now_utc()) >= self.expires_at


class AuthenticatedUser(BaseModel):
    """User and session returned by a successful verification."""

    user: User
    session: Session


# =============================================================================
# REQUESTS
# =============================================================================


class SignInRequest(WireModel):
    email: str
    password: str


class SignUpRequest(WireModel):
    email: str
    password: str
    name: str
    language: str | None = None


class VerifyOtpRequest(WireModel):
    email: str
    code: str


class EmailRequest(WireModel):
    """Body for resend-OTP and forgot-password."""

    email: str


class ResetPasswordRequest(WireModel):
    email: str
    code: str
    new_password: str


class SocialSignInRequest(WireModel):
    provider: str
    identity_token: str
    access_token: str | None = None
    hashed_nonce: str | None = None
    given_name: str | None = None
    family_name: str | None = None
    email: str | None = None
    request_sign_up: bool = True


# =============================================================================
# RESPONSES
# =============================================================================


class SignInResponse(WireModel):
    user: User
    session: Session


class SignUpResponse(WireModel):
    """
    Sign-up outcome.

    Older backends omit `success` and signal it by returning the created user.
    """

    message: str = ""
    success: bool | None = None
    user: User | None = None
    requires_verification: bool | None = None

    @property
    def succeeded(self) -> bool:
        if self.success is not None:
            return self.success
        return self.user is not None


class VerifyOtpResponse(WireModel):
    success: bool
    message: str = ""
    user: User | None = None
    session: Session | None = None


class ResendOtpResponse(WireModel):
    success: bool
    message: str = ""


class ApiErrorBody(WireModel):
    """Standard error envelope. `error` is the user-facing text."""

    error: str | None = None
    message: str | None = None
    status_code: int | None = None

    @property
    def user_message(self) -> str | None:
        return self.error or self.message


# =============================================================================
# CLIENT-SIDE STATE
# =============================================================================


class AttemptStatus(Enum):
    """Lifecycle of a single auth attempt on one screen."""

    IDLE = "idle"
    SUBMITTING = "submitting"
    AUTHENTICATED = "authenticated"
    SUCCEEDED = "succeeded"  # finished without establishing a session
    FAILED = "failed"


@dataclass(frozen=True)
class AttemptState:
    """Transient per-screen request state. Never persisted."""

    status: AttemptStatus = AttemptStatus.IDLE
    error_message: str | None = None

    @property
    def is_loading(self) -> bool:
        return self.status is AttemptStatus.SUBMITTING


@dataclass
class OtpResendState:
    """Resend countdown for one pending verification."""

    can_resend: bool = False
    countdown_seconds: int = 60


@dataclass(frozen=True)
class SignUpResult:
    """Sign-up accepted; a session is issued only after OTP verification."""

    email: str
    message: str = ""


@dataclass(frozen=True)
class SessionSnapshot:
    """Published view of who is signed in."""

    is_authenticated: bool = False
    user: User | None = None
    session: Session | None = None
    changed_at: datetime = field(default_factory=now_utc)
