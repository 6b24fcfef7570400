"""Local form validation. Runs before any network call.

Each check raises ValidationError with a user-facing message; the order of
checks is fixed so the same bad input always produces the same message.
"""

import re

from auth.config import AuthConfig
from auth.exceptions import ValidationError

EMAIL_PATTERN = re.compile(r"^[A-Z0-9a-z._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,64}$")


def is_valid_email(email: str) -> bool:
    """Full address check used by sign-up."""
    return EMAIL_PATTERN.fullmatch(email) is not None


def is_numeric_code(code: str, length: int) -> bool:
    """Exactly `length` ASCII digits."""
    return len(code) == length and code.isascii() and code.isdigit()


def validate_sign_in(email: str, password: str, config: AuthConfig) -> None:
    """Sign-in needs an email containing '@' and a minimum-length password."""
    if "@" not in email or len(password) < config.sign_in_min_password_length:
        raise ValidationError(
            "Please enter a valid email and password "
            f"(minimum {config.sign_in_min_password_length} characters)"
        )


def validate_sign_up(
    name: str,
    email: str,
    password: str,
    confirm_password: str,
    config: AuthConfig,
) -> None:
    """Check sign-up fields in order: name, email, password, confirmation."""
    min_length = config.sign_in_min_password_length

    if not name.strip():
        raise ValidationError("Please enter your full name")
    if not email:
        raise ValidationError("Please enter your email address")
    if not is_valid_email(email):
        raise ValidationError("Please enter a valid email address")
    if not password:
        raise ValidationError("Please create a password")
    if len(password) < min_length:
        raise ValidationError(f"Password must be at least {min_length} characters long")
    if not confirm_password:
        raise ValidationError("Please confirm your password")
    if password != confirm_password:
        raise ValidationError("Passwords do not match")


def validate_otp_code(code: str, config: AuthConfig) -> None:
    if not is_numeric_code(code, config.otp_code_length):
        raise ValidationError(
            f"Please enter a valid {config.otp_code_length}-digit code"
        )


def validate_reset_request(email: str) -> None:
    if not email or "@" not in email:
        raise ValidationError("Please enter a valid email address")


def validate_password_reset(
    email: str,
    code: str,
    new_password: str,
    config: AuthConfig,
    confirm_password: str | None = None,
) -> None:
    """
    Check a reset submission.

    Uses reset_min_password_length, which is stricter than the sign-in minimum.
    """
    validate_reset_request(email)
    if not is_numeric_code(code, config.otp_code_length):
        raise ValidationError(
            f"Please enter the {config.otp_code_length}-digit code from your email"
        )
    min_length = config.reset_min_password_length
    if len(new_password) < min_length:
        raise ValidationError(f"Password must be at least {min_length} characters long")
    if confirm_password is not None and confirm_password != new_password:
        raise ValidationError("Passwords do not match")
