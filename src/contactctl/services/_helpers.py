"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import UTC, datetime


def now_iso() -> str:
    """Current UTC time as millisecond ISO 8601 with a ``Z`` suffix.

    Fixed width, so lexical order of stored timestamps is chronological.
    """
    return format_timestamp(datetime.now(UTC))


def format_timestamp(moment: datetime) -> str:
    """Render *moment* in the stored timestamp format.

    Naive datetimes are taken as UTC.

    Examples:
        >>> format_timestamp(datetime(2026, 1, 2, 3, 4, 5, 678000))
        '2026-01-02T03:04:05.678Z'
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")
