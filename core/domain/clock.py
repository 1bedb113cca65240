"""Clock helpers. All persisted timestamps are naive UTC."""
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current UTC time without tzinfo (matches what the database returns)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
