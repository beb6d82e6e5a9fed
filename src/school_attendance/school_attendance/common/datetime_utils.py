from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_iso_datetime(value: str, tz_name: Optional[str] = None) -> datetime:
    """Parse an ISO-8601 timestamp into a naive institution-local datetime.

    A timestamp with an offset (``...Z``, ``...+07:00``) is converted to
    ``tz_name`` (server local time when empty) before the offset is dropped.
    Naive timestamps are taken as already local.
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        return parsed
    return parsed.astimezone(ZoneInfo(tz_name) if tz_name else None).replace(tzinfo=None)


def parse_hhmm(value: str) -> time:
    """Parse an ``HH:MM`` time-of-day string."""
    return datetime.strptime(value.strip(), "%H:%M").time()


def format_hhmm(value: time) -> str:
    return value.strftime("%H:%M")


def time_of_day_offset(value: time) -> timedelta:
    """Distance from midnight, ignoring any date or timezone."""
    return timedelta(
        hours=value.hour,
        minutes=value.minute,
        seconds=value.second,
        microseconds=value.microsecond,
    )


def now_local(tz_name: Optional[str] = None) -> datetime:
    """Current wall-clock time in the institution's timezone, as a naive datetime.

    Note: Wrapped so tests can patch/mocked easier.
    """
    if not tz_name:
        return datetime.now()
    return datetime.now(ZoneInfo(tz_name)).replace(tzinfo=None)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_epoch_ms(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() * 1000)
