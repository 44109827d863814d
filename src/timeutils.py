"""Time helpers for schedule windows, countdowns and display strings.

All instants handled here are timezone-aware.  Values are kept in UTC and
converted to the display timezone only when a local calendar matters
(day arithmetic, slot hours, grouping by day and formatting).
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any, Optional

from dateutil import parser as _dateparse

from .config import app_timezone


def utc_now() -> datetime:
    """Default clock for UI code; derivations take ``now`` explicitly."""
    return datetime.now(timezone.utc)


def _local_tz(tz: Optional[tzinfo]) -> tzinfo:
    return tz if tz is not None else app_timezone()


def _ensure_utc(ts: datetime) -> datetime:
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def to_datetime_any(value: Any) -> Optional[datetime]:
    """Best-effort conversion of Firestore/JSON datetime payloads to UTC."""
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        return _ensure_utc(value)

    if hasattr(value, "to_datetime"):
        return _ensure_utc(value.to_datetime())

    try:
        parsed = _dateparse.isoparse(str(value).strip())
    except (ValueError, OverflowError):
        try:
            parsed = _dateparse.parse(str(value).strip())
        except (ValueError, OverflowError):
            return None
    return _ensure_utc(parsed)


def add_days(instant: datetime, n: int, tz: Optional[tzinfo] = None) -> datetime:
    """Move ``instant`` by ``n`` local calendar days keeping the wall clock."""
    local = instant.astimezone(_local_tz(tz))
    shifted = local.replace(tzinfo=None) + timedelta(days=n)
    return shifted.replace(tzinfo=local.tzinfo).astimezone(timezone.utc)


def add_minutes(instant: datetime, n: int) -> datetime:
    return _ensure_utc(instant) + timedelta(minutes=n)


def at_local_time(
    instant: datetime, hour: int, minute: int = 0, tz: Optional[tzinfo] = None
) -> datetime:
    """Keep the local date of ``instant`` but set the clock to ``hour:minute``."""
    local = instant.astimezone(_local_tz(tz))
    return local.replace(hour=hour, minute=minute, second=0, microsecond=0).astimezone(
        timezone.utc
    )


def start_of_day(instant: datetime, tz: Optional[tzinfo] = None) -> datetime:
    return at_local_time(instant, 0, 0, tz)


def date_key(instant: datetime, tz: Optional[tzinfo] = None) -> str:
    """``YYYY-MM-DD`` of the instant in the local calendar."""
    return instant.astimezone(_local_tz(tz)).strftime("%Y-%m-%d")


def format_display(instant: datetime, tz: Optional[tzinfo] = None) -> str:
    """Render ``YYYY-MM-DD hh:mm AM/PM`` in the local timezone."""
    local = instant.astimezone(_local_tz(tz))
    hour12 = local.hour % 12 or 12
    ampm = "PM" if local.hour >= 12 else "AM"
    return f"{local:%Y-%m-%d} {hour12:02d}:{local.minute:02d} {ampm}"


def iso_z(instant: datetime) -> str:
    """UTC ISO string with milliseconds, e.g. ``2025-01-01T08:00:00.000Z``."""
    utc = _ensure_utc(instant)
    return f"{utc:%Y-%m-%dT%H:%M:%S}.{utc.microsecond // 1000:03d}Z"


def duration_ms(start: datetime, end: datetime) -> int:
    return int((end - start).total_seconds() * 1000)


def clock_string(ms: float) -> str:
    """Render a millisecond duration as ``Dd HH:MM:SS`` (or ``HH:MM:SS``).

    Negative durations clamp to zero so countdowns never go below
    ``00:00:00``.
    """
    total = max(0, int(ms // 1000))
    days, rem = divmod(total, 86400)
    hours, rem = divmod(rem, 3600)
    minutes, seconds = divmod(rem, 60)
    clock = f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    return f"{days}d {clock}" if days > 0 else clock


__all__ = [
    "utc_now",
    "to_datetime_any",
    "add_days",
    "add_minutes",
    "at_local_time",
    "start_of_day",
    "date_key",
    "format_display",
    "iso_z",
    "duration_ms",
    "clock_string",
]
