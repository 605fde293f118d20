"""Time Utilities for UTC management"""

from datetime import datetime, timezone


def get_utc_now() -> datetime:
    """Returns a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """ISO-8601 UTC timestamp used for record created_at / updated_at fields."""
    return get_utc_now().isoformat().replace("+00:00", "Z")


def local_hour() -> int:
    """Current hour on the server's local clock (drives the automatic theme)."""
    return datetime.now().hour
