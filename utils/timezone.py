"""UTC clock for audit records, snapshots and session expiry checks."""

from datetime import datetime, timezone


def now_utc() -> datetime:
    """Timezone-aware current time in UTC. Backend timestamps are compared against this."""
    return datetime.now(timezone.utc)
