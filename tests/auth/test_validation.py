"""Tests for auth/validation.py - local checks that run before any request."""

import pytest

from auth.config import AuthConfig
from auth.exceptions import ValidationError
from auth.validation import (
    is_numeric_code,
    is_valid_email,
    validate_otp_code,
    validate_password_reset,
    validate_reset_request,
    validate_sign_in,
    validate_sign_up,
)

CONFIG = AuthConfig()


class TestEmailAndCode:

    @pytest.mark.parametrize("email", ["a@b.co", "first.last+tag@example.com"])
    def test_valid_emails(self, email):
        assert is_valid_email(email)

    @pytest.mark.parametrize("email", ["", "plain", "a@b", "a@b.c", "a b@example.com"])
    def test_invalid_emails(self, email):
        assert not is_valid_email(email)

    def test_numeric_code_requires_exact_length(self):
        assert is_numeric_code("482913", 6)
        assert not is_numeric_code("48291", 6)
        assert not is_numeric_code("4829130", 6)

    def test_numeric_code_rejects_non_ascii_digits(self):
        assert not is_numeric_code("١٢٣٤٥٦", 6)
        assert not is_numeric_code("12a456", 6)


class TestSignIn:

    def test_accepts_minimum_password(self):
        validate_sign_in("user@example.com", "secret", CONFIG)

    @pytest.mark.parametrize(
        "email,password",
        [("userexample.com", "secret1"), ("user@example.com", "12345"), ("", "")],
    )
    def test_rejects(self, email, password):
        with pytest.raises(ValidationError, match="minimum 6 characters"):
            validate_sign_in(email, password, CONFIG)


class TestSignUpOrder:
    """Checks run name -> email -> password -> confirmation, first failure wins."""

    @pytest.mark.parametrize(
        "fields,message",
        [
            (("   ", "", "", ""), "Please enter your full name"),
            (("Jane", "", "", ""), "Please enter your email address"),
            (("Jane", "jane@", "", ""), "Please enter a valid email address"),
            (("Jane", "jane@example.com", "", ""), "Please create a password"),
            (("Jane", "jane@example.com", "12345", ""), "at least 6 characters"),
            (("Jane", "jane@example.com", "pw123456", ""), "Please confirm your password"),
            (("Jane", "jane@example.com", "pw123456", "pw123457"), "Passwords do not match"),
        ],
    )
    def test_first_failing_check_wins(self, fields, message):
        with pytest.raises(ValidationError, match=message):
            validate_sign_up(*fields, CONFIG)

    def test_valid_form_passes(self):
        validate_sign_up("Jane Doe", "jane@example.com", "pw123456", "pw123456", CONFIG)


class TestOtpAndReset:

    def test_otp_rejects_short_code(self):
        with pytest.raises(ValidationError, match="6-digit"):
            validate_otp_code("12345", CONFIG)

    def test_reset_request_needs_at_sign(self):
        with pytest.raises(ValidationError):
            validate_reset_request("nobody")

    def test_reset_uses_stricter_minimum(self):
        with pytest.raises(ValidationError, match="at least 8 characters"):
            validate_password_reset("a@b.com", "000000", "short12", CONFIG)

    def test_reset_rejects_non_numeric_code(self):
        with pytest.raises(ValidationError, match="6-digit code"):
            validate_password_reset("a@b.com", "00000a", "longenough", CONFIG)

    def test_reset_checks_confirmation_when_given(self):
        with pytest.raises(ValidationError, match="do not match"):
            validate_password_reset(
                "a@b.com", "000000", "longenough", CONFIG, confirm_password="different1"
            )

    def test_reset_valid(self):
        validate_password_reset("a@b.com", "000000", "longenough", CONFIG)
