"""OTP verification screen controller.

Owns the resend countdown and code submission for one pending verification.
Timers run through the shared Scheduler, so every state change here happens on
the thread that drives it.
"""

import logging

from auth.attempt import AuthAttempt
from auth.config import AuthConfig
from auth.exceptions import AuthError
from auth.service import SessionService
from auth.types import AuthenticatedUser, OtpResendState
from utils.scheduler import ScheduledCall, Scheduler

logger = logging.getLogger(__name__)


class OtpVerificationController:
    """
    Resend countdown plus verify/resend actions for one email address.

    Usage:
        controller = OtpVerificationController(service, scheduler, config)
        controller.start_resend_timer()          # when the screen appears
        controller.verify_otp(email, "482913")
        ...
        controller.close()                        # when the screen goes away
    """

    def __init__(self, service: SessionService, scheduler: Scheduler, config: AuthConfig):
        self._service = service
        self._scheduler = scheduler
        self._config = config

        self.attempt = AuthAttempt()
        self.resend = OtpResendState(
            can_resend=False, countdown_seconds=config.otp_resend_countdown_seconds
        )
        self.show_success_toast = False
        self.show_resend_success = False

        self._countdown: ScheduledCall | None = None
        self._hide_resend_success: ScheduledCall | None = None
        self._activation: ScheduledCall | None = None

    @property
    def is_loading(self) -> bool:
        return self.attempt.is_loading

    @property
    def error_message(self) -> str | None:
        return self.attempt.error_message

    @property
    def timer_active(self) -> bool:
        return self._countdown is not None and not self._countdown.cancelled

    # =========================================================================
    # RESEND COUNTDOWN
    # =========================================================================

    def start_resend_timer(self) -> None:
        """Reset the countdown and tick once per second until resend is allowed."""
        self._stop_countdown()

        self.resend.can_resend = False
        self.resend.countdown_seconds = self._config.otp_resend_countdown_seconds
        self._countdown = self._scheduler.call_every(1.0, self._tick)

    def _tick(self) -> None:
        if self.resend.countdown_seconds > 0:
            self.resend.countdown_seconds -= 1

        if self.resend.countdown_seconds <= 0:
            self.resend.countdown_seconds = 0
            self.resend.can_resend = True
            self._stop_countdown()

    def _stop_countdown(self) -> None:
        if self._countdown is not None:
            self._countdown.cancel()
            self._countdown = None

    # =========================================================================
    # ACTIONS
    # =========================================================================

    def verify_otp(self, email: str, code: str) -> bool:
        """
        Submit a code.

        On success the token is already persisted; the session is published
        after otp_success_delay_seconds so the success toast can show first.

        Returns:
            True if the backend accepted the code.
        """
        authenticated = self.attempt.run(
            lambda: self._service.verify_otp(email, code), authenticates=True
        )
        if authenticated is None:
            return False

        self.show_success_toast = True
        logger.info(f"OTP verified for {email}, activating session shortly")

        if self._activation is not None:
            self._activation.cancel()
        self._activation = self._scheduler.call_later(
            self._config.otp_success_delay_seconds,
            lambda: self._activate(authenticated),
        )
        return True

    def _activate(self, authenticated: AuthenticatedUser) -> None:
        self._activation = None
        try:
            self._service.activate(authenticated)
        except AuthError as e:
            self.attempt.report_error(e)

    def resend_otp(self, email: str) -> bool:
        """
        Ask for a new code. On success restart the countdown and briefly show
        a confirmation.

        Returns:
            True if the backend sent a new code.
        """
        self.attempt.clear_error()
        self._set_resend_success(False)

        try:
            self._service.resend_otp(email)
        except AuthError as e:
            self.attempt.report_error(e)
            return False

        self.start_resend_timer()
        self._set_resend_success(True)
        self._hide_resend_success = self._scheduler.call_later(
            self._config.resend_success_display_seconds,
            lambda: self._set_resend_success(False),
        )
        return True

    def _set_resend_success(self, visible: bool) -> None:
        if self._hide_resend_success is not None:
            self._hide_resend_success.cancel()
            self._hide_resend_success = None
        self.show_resend_success = visible

    def close(self) -> None:
        """
        Stop screen-owned timers.

        A pending activation is left alone: its token is already persisted.
        """
        self._stop_countdown()
        self._set_resend_success(False)
