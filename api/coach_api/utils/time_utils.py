"""
Time helpers. All stored timestamps are timezone-aware UTC.
"""
from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
