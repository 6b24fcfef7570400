"""Security event logging for the auth audit trail.

Events go to the 'auth.security' logger and into a bounded in-memory buffer
that can be queried for recent activity. Passwords, codes and tokens are never
recorded.
"""

import logging
from collections import deque
from enum import Enum
from typing import Any

from utils.timezone import now_utc

logger = logging.getLogger("auth.security")


class SecurityEvent(Enum):
    """Auth security event types."""

    SIGN_IN_SUCCEEDED = "sign_in_succeeded"
    SIGN_IN_FAILED = "sign_in_failed"
    FEDERATED_SIGN_IN_SUCCEEDED = "federated_sign_in_succeeded"
    FEDERATED_SIGN_IN_FAILED = "federated_sign_in_failed"
    SIGN_UP_REQUESTED = "sign_up_requested"
    SIGN_UP_FAILED = "sign_up_failed"
    OTP_VERIFIED = "otp_verified"
    OTP_FAILED = "otp_failed"
    OTP_RESENT = "otp_resent"
    PASSWORD_RESET_REQUESTED = "password_reset_requested"
    PASSWORD_RESET_COMPLETED = "password_reset_completed"
    PASSWORD_RESET_FAILED = "password_reset_failed"
    SESSION_ESTABLISHED = "session_established"
    SESSION_RESTORED = "session_restored"
    SESSION_EXPIRED = "session_expired"
    SESSION_CLEARED = "session_cleared"
    TOKEN_STORE_FAILED = "token_store_failed"


_FAILURE_EVENTS = {
    SecurityEvent.SIGN_IN_FAILED,
    SecurityEvent.FEDERATED_SIGN_IN_FAILED,
    SecurityEvent.SIGN_UP_FAILED,
    SecurityEvent.OTP_FAILED,
    SecurityEvent.PASSWORD_RESET_FAILED,
    SecurityEvent.TOKEN_STORE_FAILED,
}


class SecurityLogger:
    """Append-only security event log with a bounded history."""

    def __init__(self, history_size: int = 200):
        self._events: deque[dict[str, Any]] = deque(maxlen=history_size)

    def log(
        self,
        event: SecurityEvent,
        email: str | None = None,
        user_id: str | None = None,
        provider: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Record a security event."""
        record = {
            "event_type": event.value,
            "email": email.lower().strip() if email else None,
            "user_id": user_id,
            "provider": provider,
            "details": details,
            "created_at": now_utc(),
        }
        self._events.append(record)

        level = logging.WARNING if event in _FAILURE_EVENTS else logging.INFO
        logger.log(
            level,
            "%s email=%s user_id=%s provider=%s details=%s",
            event.value,
            record["email"],
            user_id,
            provider,
            details,
            extra={"security_event": event.value},
        )

    def get_recent_events(
        self,
        email: str | None = None,
        event_type: SecurityEvent | None = None,
        limit: int = 100,
    ) -> list[dict]:
        """Most recent events first, with optional filters."""
        matches = []
        for record in reversed(self._events):
            if email and record["email"] != email.lower().strip():
                continue
            if event_type and record["event_type"] != event_type.value:
                continue
            matches.append(record)
            if len(matches) >= limit:
                break
        return matches
