"""End-to-end flows through the real HTTP client against a mocked backend."""

import pytest
import responses

from auth.exceptions import ValidationError
from auth.otp import OtpVerificationController
from auth.service import SessionService
from tests.factories import TEST_API_URL, session_payload, user_payload


@pytest.fixture
def live_service(config, token_store, state, security_logger) -> SessionService:
    return SessionService.create(
        config, token_store, state=state, security_logger=security_logger
    )


class TestSignInFlow:

    @responses.activate
    def test_sign_in_then_sign_out(self, live_service, token_store, state):
        responses.add(
            responses.POST,
            f"{TEST_API_URL}/auth/sign-in",
            json={"user": user_payload(), "session": session_payload(token="abc")},
            status=200,
        )

        live_service.sign_in("user@example.com", "secret1")

        assert token_store.retrieve_token() == "abc"
        assert state.is_authenticated

        live_service.sign_out()

        assert token_store.retrieve_token() is None
        assert state.current_user is None
        assert not state.is_authenticated


class TestSignUpFlow:

    @responses.activate
    def test_sign_up_verify_then_activate(self, live_service, config, clock, scheduler, state):
        responses.add(
            responses.POST,
            f"{TEST_API_URL}/auth/sign-up",
            json={"success": True, "message": "Verification code sent", "requiresVerification": True},
            status=200,
        )
        jane = user_payload(id="usr_jane", email="jane@example.com", name="Jane Doe")
        responses.add(
            responses.POST,
            f"{TEST_API_URL}/verify-otp",
            json={"success": True, "user": jane, "session": session_payload(token="jane-token")},
            status=200,
        )

        result = live_service.sign_up("Jane Doe", "jane@example.com", "pw123456", "pw123456")
        assert not state.is_authenticated

        controller = OtpVerificationController(live_service, scheduler, config)
        controller.start_resend_timer()
        assert controller.verify_otp(result.email, "482913")

        clock.advance(config.otp_success_delay_seconds)
        scheduler.run_pending()

        assert state.is_authenticated
        assert state.current_user.id == "usr_jane"
        assert state.session.token == "jane-token"


class TestPasswordResetFlow:

    @responses.activate
    def test_short_password_never_reaches_backend(self, live_service):
        with pytest.raises(ValidationError):
            live_service.reset_password("a@b.com", "000000", "short")

        assert len(responses.calls) == 0
