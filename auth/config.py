"""Authentication configuration."""

from pydantic import BaseModel, Field


class ApiEndpoints(BaseModel):
    """Auth endpoint paths, relative to the API base URL."""

    sign_in: str = "/auth/sign-in"
    sign_up: str = "/auth/sign-up"
    verify_otp: str = "/verify-otp"
    resend_otp: str = "/auth/resend-otp"
    forgot_password: str = "/auth/forgot-password"
    reset_password: str = "/auth/reset-password"
    social_sign_in: str = "/auth/sign-in/social"


class AuthConfig(BaseModel):
    """
    Authentication configuration.

    Durations are in seconds. The sign-in and reset password minimums are
    deliberately separate settings; see DESIGN.md before changing either.
    """

    # Backend
    api_base_url: str = Field(
        default="https://api.sketchwink.com/api",
        description="Base URL including the /api prefix",
    )
    request_timeout_seconds: float = Field(
        default=30,
        description="Per-request HTTP timeout",
        gt=0,
        le=120,
    )
    endpoints: ApiEndpoints = Field(default_factory=ApiEndpoints)

    # Password policy
    sign_in_min_password_length: int = Field(
        default=6,
        description="Minimum password length for sign-in and sign-up",
        ge=1,
        le=128,
    )
    reset_min_password_length: int = Field(
        default=8,
        description="Minimum new password length for password reset",
        ge=1,
        le=128,
    )

    # OTP
    otp_code_length: int = Field(
        default=6,
        description="Digits in an emailed verification or reset code",
        ge=4,
        le=10,
    )
    otp_resend_countdown_seconds: int = Field(
        default=60,
        description="Wait before a code may be resent",
        ge=1,
        le=600,
    )
    otp_success_delay_seconds: float = Field(
        default=1.5,
        description="Grace period between OTP success and session activation",
        ge=0,
        le=10,
    )
    resend_success_display_seconds: float = Field(
        default=3.0,
        description="How long the 'code sent' indicator stays visible",
        ge=0,
        le=30,
    )

    # Federated sign-in
    apple_nonce_length: int = Field(
        default=32,
        description="Characters in a raw Apple sign-in nonce",
        ge=16,
        le=128,
    )

    # Application
    token_namespace: str = Field(
        default="sketchwink",
        description="Application identity the session token is stored under",
        min_length=1,
    )
    default_language: str = Field(
        default="en",
        description="Language sent with sign-up when the caller gives none",
        min_length=2,
    )
