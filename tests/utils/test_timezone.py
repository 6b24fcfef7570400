"""Tests for utils/timezone.py."""

from datetime import timezone

from auth.types import Session
from utils.timezone import now_utc


def test_now_utc_is_aware_utc():
    assert now_utc().tzinfo == timezone.utc


def test_now_utc_compares_with_backend_expiry():
    """Parsed expiries and the clock are both aware, so they compare directly."""
    session = Session.model_validate({"token": "t", "expiresAt": "2000-01-01T00:00:00.000Z"})
    assert now_utc() > session.expires_at
