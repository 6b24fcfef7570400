"""Per-screen attempt state: Idle -> Submitting -> Authenticated | Succeeded | Failed."""

import logging
from typing import Callable, TypeVar

from auth.exceptions import AuthError, SignInCancelledError, TransportError
from auth.types import AttemptState, AttemptStatus

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AuthAttempt:
    """
    Loading flag and error message for one screen.

    Guards against double submission: while a request is in flight, further
    run() calls are ignored. Errors never carry over into the next attempt.
    """

    def __init__(self):
        self.state = AttemptState()

    @property
    def status(self) -> AttemptStatus:
        return self.state.status

    @property
    def is_loading(self) -> bool:
        return self.state.is_loading

    @property
    def error_message(self) -> str | None:
        return self.state.error_message

    def run(self, operation: Callable[[], T], authenticates: bool = False) -> T | None:
        """
        Run operation as this screen's single in-flight request.

        Returns:
            The operation's result, or None if it failed, was cancelled, or
            another request was already in flight.
        """
        if self.is_loading:
            logger.debug("Ignoring submission while a request is in flight")
            return None

        self.state = AttemptState(status=AttemptStatus.SUBMITTING)
        try:
            result = operation()
        except SignInCancelledError:
            self.state = AttemptState()
            return None
        except AuthError as e:
            self.report_error(e)
            return None
        except Exception:
            logger.exception("Unexpected error during auth attempt")
            self.report_error(TransportError())
            return None

        self.state = AttemptState(
            status=AttemptStatus.AUTHENTICATED if authenticates else AttemptStatus.SUCCEEDED
        )
        return result

    def report_error(self, error: AuthError) -> None:
        self.state = AttemptState(
            status=AttemptStatus.FAILED, error_message=error.user_message or None
        )

    def clear_error(self) -> None:
        if self.state.error_message is not None:
            self.state = AttemptState(status=self.state.status)

    def reset(self) -> None:
        self.state = AttemptState()
