"""
Time Utilities

- Store/query in database as UTC (naive) timestamps.
- Use UTC-aware datetimes at the domain boundary.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone

UTC = timezone.utc


def utc_now() -> datetime:
    """Return current UTC time (timezone-aware)."""
    return datetime.now(UTC)


def utc_now_naive() -> datetime:
    """Return current UTC time without tzinfo, for database columns."""
    return utc_now().replace(tzinfo=None)


def now_ms() -> int:
    """Milliseconds since the epoch, used in synthetic ids."""
    return int(time.time() * 1000)


def now_seconds() -> int:
    """Seconds since the epoch, used for OpenAI `created` fields."""
    return int(time.time())
