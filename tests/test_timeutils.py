from datetime import datetime, timezone
from types import SimpleNamespace
from zoneinfo import ZoneInfo

import pytest

from src.timeutils import (
    add_days,
    add_minutes,
    at_local_time,
    clock_string,
    date_key,
    format_display,
    iso_z,
    start_of_day,
    to_datetime_any,
)

UTC = timezone.utc
MANILA = ZoneInfo("Asia/Manila")


@pytest.mark.parametrize(
    "ms, expected",
    [
        (0, "00:00:00"),
        (999, "00:00:00"),
        (61_000, "00:01:01"),
        (90_061_000, "1d 01:01:01"),
        (-5_000, "00:00:00"),
        (3 * 86_400_000, "3d 00:00:00"),
    ],
)
def test_clock_string(ms, expected):
    assert clock_string(ms) == expected


def test_add_days_keeps_wall_clock():
    start = datetime(2025, 1, 1, 8, 0, tzinfo=UTC)
    assert add_days(start, 6, UTC) == datetime(2025, 1, 7, 8, 0, tzinfo=UTC)


def test_add_days_across_dst_keeps_local_time():
    ny = ZoneInfo("America/New_York")
    start = datetime(2025, 3, 8, 8, 0, tzinfo=ny)
    shifted = add_days(start, 1, ny)
    assert shifted.astimezone(ny).hour == 8
    assert shifted.tzinfo == UTC


def test_add_minutes():
    start = datetime(2025, 1, 1, 8, 0, tzinfo=UTC)
    assert add_minutes(start, 120) == datetime(2025, 1, 1, 10, 0, tzinfo=UTC)


def test_at_local_time_uses_local_calendar():
    # 20:00 UTC on Jan 1 is already Jan 2 in Manila.
    instant = datetime(2025, 1, 1, 20, 0, tzinfo=UTC)
    result = at_local_time(instant, 8, 0, MANILA)
    assert result == datetime(2025, 1, 2, 0, 0, tzinfo=UTC)


def test_start_of_day_and_date_key():
    instant = datetime(2025, 1, 1, 20, 0, tzinfo=UTC)
    assert start_of_day(instant, UTC) == datetime(2025, 1, 1, tzinfo=UTC)
    assert date_key(instant, UTC) == "2025-01-01"
    assert date_key(instant, MANILA) == "2025-01-02"


def test_format_display_twelve_hour_clock():
    assert format_display(datetime(2025, 1, 1, 18, 5, tzinfo=UTC), UTC) == "2025-01-01 06:05 PM"
    assert format_display(datetime(2025, 1, 1, 0, 0, tzinfo=UTC), UTC) == "2025-01-01 12:00 AM"


def test_iso_z_has_milliseconds():
    assert iso_z(datetime(2025, 1, 1, 8, 0, tzinfo=UTC)) == "2025-01-01T08:00:00.000Z"
    assert iso_z(datetime(2025, 1, 1, 16, 0, tzinfo=MANILA)) == "2025-01-01T08:00:00.000Z"


def test_to_datetime_any_variants():
    expected = datetime(2025, 1, 1, 8, 0, tzinfo=UTC)
    assert to_datetime_any("2025-01-01T08:00:00Z") == expected
    assert to_datetime_any("2025-01-01T16:00:00+08:00") == expected
    assert to_datetime_any(datetime(2025, 1, 1, 8, 0)) == expected
    stamp = SimpleNamespace(to_datetime=lambda: expected)
    assert to_datetime_any(stamp) == expected
    assert to_datetime_any("") is None
    assert to_datetime_any(None) is None
    assert to_datetime_any("not a date") is None
