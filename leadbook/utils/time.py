"""UTC timestamp helpers.

Stored timestamps never carry more than millisecond precision, so a
concurrency token serialised by a JSON client round-trips exactly.
"""

from datetime import UTC, datetime, timedelta


def as_utc(ts: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC)


def truncate_to_millis(ts: datetime) -> datetime:
    """Normalise to UTC and drop sub-millisecond precision."""
    ts = as_utc(ts)
    return ts.replace(microsecond=(ts.microsecond // 1000) * 1000)


def utc_now() -> datetime:
    """Current UTC time at millisecond precision."""
    return truncate_to_millis(datetime.now(UTC))


def next_updated_at(previous: datetime) -> datetime:
    """Timestamp for a new write, strictly after the previous one."""
    floor = truncate_to_millis(previous) + timedelta(milliseconds=1)
    return max(utc_now(), floor)
