"""Helpers for working with timezone-aware datetimes."""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def coerce_utc(value: datetime | None) -> datetime | None:
    """Return a UTC-normalized datetime, assuming naive values are already UTC.

    SQLite hands timestamps back without an offset even when they were
    written as UTC, so rows read from it go through here before they reach a
    response model.
    """

    if value is None:
        return None

    if value.tzinfo is None or value.utcoffset() is None:
        return value.replace(tzinfo=timezone.utc)

    return value.astimezone(timezone.utc)


def isoformat_utc(value: datetime | None = None) -> str:
    """ISO-8601 text in UTC with a ``Z`` suffix; defaults to now."""

    moment = coerce_utc(value) if value is not None else utc_now()
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
