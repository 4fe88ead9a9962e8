"""
Timestamp helpers shared by the episode components.

All stored timestamps are timezone-aware UTC. Durations are always minutes
and are only ever computed by ``minutes_between``.
"""

from __future__ import annotations

from datetime import UTC, datetime

DEFAULT_PERIOD_FORMAT = "%Y-%m"


def parse_timestamp(value: object) -> datetime | None:
    """
    Coerce a datetime or ISO-8601 string to an aware UTC datetime.

    Naive values are taken to be UTC. Returns None for anything that is not
    a valid timestamp.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        # fromisoformat only learned the "Z" suffix in 3.11
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    try:
        return dt.astimezone(UTC)
    except (OverflowError, ValueError):
        # e.g. 0001-01-01T00:00+05:00 has no UTC representation
        return None


def minutes_between(start: datetime, end: datetime) -> float:
    """Elapsed minutes from start to end."""
    return (end - start).total_seconds() / 60


def period_for(ts: datetime, fmt: str = DEFAULT_PERIOD_FORMAT) -> str:
    """Period key (calendar month by default) containing ts."""
    if ts.tzinfo is not None:
        ts = ts.astimezone(UTC)
    return ts.strftime(fmt)
