"""Date and timestamp helpers.

All arithmetic happens in UTC.  Calendar days are ``YYYY-MM-DD`` strings,
timestamps are ISO 8601 strings; output timestamps always use the
millisecond ``Z`` form (``2024-01-01T00:05:00.000Z``).
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

MINUTES_PER_DAY = 24 * 60


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 timestamp into an aware UTC datetime.

    A trailing ``Z`` is accepted; naive timestamps are taken as UTC.
    Raises ``ValueError`` on malformed input.
    """
    text = value.strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_timestamp(dt: datetime) -> str:
    """Render *dt* as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC."""
    utc = dt.astimezone(timezone.utc)
    return f"{utc:%Y-%m-%dT%H:%M:%S}.{utc.microsecond // 1000:03d}Z"


def add_seconds(start: str, seconds: float) -> str:
    """Offset an ISO timestamp by *seconds* and return the UTC rendering."""
    return format_timestamp(parse_timestamp(start) + timedelta(seconds=seconds))


def add_days(day: str, delta: int) -> str:
    """Calendar-add *delta* days to a ``YYYY-MM-DD`` string."""
    return (date.fromisoformat(day) + timedelta(days=delta)).isoformat()


def clock_minutes(timestamp: str | None) -> int | None:
    """Minutes since UTC midnight for *timestamp*.

    None passes through; a malformed timestamp also yields None so that one
    bad record reads as missing data.
    """
    if not timestamp:
        return None
    try:
        dt = parse_timestamp(timestamp)
    except ValueError:
        return None
    return dt.hour * 60 + dt.minute


def is_weekend(day: str) -> bool:
    """True when the calendar day is a Saturday or Sunday."""
    return date.fromisoformat(day).weekday() >= 5
