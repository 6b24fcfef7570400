"""Tests for auth/types.py - Pydantic models for auth domain."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from auth.types import (
    ApiErrorBody,
    AttemptState,
    AttemptStatus,
    Session,
    SignUpResponse,
    SocialSignInRequest,
    User,
    VerifyOtpResponse,
)
from tests.factories import session_payload, user_payload


class TestUserParsing:
    """User snapshots decode from backend camelCase JSON."""

    def test_parses_camel_case(self):
        user = User.model_validate(user_payload())
        assert user.email_verified is True
        assert user.prompt_enhancement_enabled is True
        assert user.created_at.tzinfo == timezone.utc

    def test_missing_optional_fields_default(self):
        user = User.model_validate(
            {"id": "u1", "email": "a@example.com", "name": "A", "emailVerified": False}
        )
        assert user.role == "user"
        assert user.prompt_enhancement_enabled is True
        assert user.image is None

    def test_null_role_defaults_to_user(self):
        user = User.model_validate(user_payload(role=None, promptEnhancementEnabled=None))
        assert user.role == "user"
        assert user.prompt_enhancement_enabled is True

    @pytest.mark.parametrize(
        "email", ["kid@family.local", "dev@localhost", "Jane@EXAMPLE.COM"]
    )
    def test_email_kept_exactly_as_sent(self, email):
        """Backend addresses are not re-validated or normalized locally."""
        user = User.model_validate(user_payload(email=email))
        assert user.email == email

    def test_naive_timestamp_becomes_none(self):
        user = User.model_validate(user_payload(createdAt="2025-01-01T00:00:00"))
        assert user.created_at is None
        assert user.updated_at is not None

    def test_unparseable_timestamp_becomes_none(self):
        user = User.model_validate(user_payload(updatedAt="yesterday"))
        assert user.updated_at is None

    def test_offset_timestamp_normalized_to_utc(self):
        user = User.model_validate(user_payload(createdAt="2025-01-01T12:00:00-06:00"))
        assert user.created_at.tzinfo == timezone.utc
        assert user.created_at.hour == 18

    def test_is_immutable(self):
        user = User.model_validate(user_payload())
        with pytest.raises(ValidationError):
            user.name = "Changed"


class TestSession:

    def test_parses_expiry(self):
        session = Session.model_validate(session_payload())
        assert session.expires_at == datetime(2099, 1, 1, tzinfo=timezone.utc)

    def test_rejects_empty_token(self):
        with pytest.raises(ValidationError):
            Session(token="")

    def test_unknown_expiry_never_expires(self):
        assert Session(token="t").is_expired() is False

    def test_naive_expiry_treated_as_unknown(self):
        session = Session.model_validate(session_payload(expiresAt="2000-01-01T00:00:00"))
        assert session.expires_at is None
        assert session.is_expired() is False

    def test_past_expiry_is_expired(self):
        past = datetime.now(timezone.utc) - timedelta(minutes=1)
        assert Session(token="t", expires_at=past).is_expired() is True


class TestWireSerialization:

    def test_social_request_uses_camel_case_and_drops_none(self):
        body = SocialSignInRequest(
            provider="apple", identity_token="tok", hashed_nonce="h"
        ).to_wire()

        assert body == {
            "provider": "apple",
            "identityToken": "tok",
            "hashedNonce": "h",
            "requestSignUp": True,
        }


class TestSignUpResponse:

    def test_explicit_success(self):
        assert SignUpResponse(success=True, message="ok").succeeded is True

    def test_user_implies_success(self):
        response = SignUpResponse.model_validate({"message": "", "user": user_payload()})
        assert response.succeeded is True

    def test_no_user_no_flag_is_not_success(self):
        assert SignUpResponse(message="User already exists").succeeded is False


class TestOtherModels:

    def test_verify_response_without_session(self):
        response = VerifyOtpResponse.model_validate({"success": False, "message": "Invalid code"})
        assert response.user is None
        assert response.session is None

    def test_error_body_prefers_error_field(self):
        body = ApiErrorBody.model_validate({"error": "Email taken", "message": "Conflict"})
        assert body.user_message == "Email taken"

    def test_error_body_falls_back_to_message(self):
        assert ApiErrorBody(message="Conflict").user_message == "Conflict"

    def test_attempt_state_loading_tracks_status(self):
        assert AttemptState().is_loading is False
        assert AttemptState(status=AttemptStatus.SUBMITTING).is_loading is True
