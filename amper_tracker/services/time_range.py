"""Lookback window tokens such as ``24h`` or ``7d``."""

import re
from datetime import datetime, timedelta, timezone

ALLOWED_HOURS = frozenset({1, 6, 12, 24})
ALLOWED_DAYS = frozenset({7, 30})

_TOKEN_PATTERN = re.compile(r"([0-9]+)([hd])")


def parse_time_range(token: str | None, now: datetime | None = None) -> datetime | None:
    """Map a range token to the earliest ``created_at`` it admits.

    Returns ``None`` (no filter) when the token is absent, malformed, or
    names a window outside the allowed set. Unsupported tokens never raise.
    """
    if not token:
        return None

    match = _TOKEN_PATTERN.fullmatch(token)
    if not match:
        return None

    value = int(match.group(1))
    unit = match.group(2)
    if unit == "h" and value not in ALLOWED_HOURS:
        return None
    if unit == "d" and value not in ALLOWED_DAYS:
        return None

    hours = value if unit == "h" else value * 24
    current = now or datetime.now(timezone.utc)
    return current - timedelta(hours=hours)
