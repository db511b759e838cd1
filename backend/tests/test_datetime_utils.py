from __future__ import annotations

import sys
from datetime import date, datetime, timezone
from pathlib import Path

import pytest


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from services.errors import InvalidState  # noqa: E402
from utils.datetime_utils import calendar_day, day_window, is_today, is_yesterday, parse_day  # noqa: E402


def test_calendar_day_discards_time_of_day():
    assert calendar_day(datetime(2026, 3, 10, 0, 0)) == date(2026, 3, 10)
    assert calendar_day(datetime(2026, 3, 10, 23, 59, 59)) == date(2026, 3, 10)
    assert calendar_day(date(2026, 3, 10)) == date(2026, 3, 10)


def test_calendar_day_converts_aware_timestamps_to_reference_zone():
    late_utc = datetime(2026, 3, 10, 23, 30, tzinfo=timezone.utc)
    assert calendar_day(late_utc, "UTC") == date(2026, 3, 10)
    assert calendar_day(late_utc, "Asia/Tokyo") == date(2026, 3, 11)
    assert calendar_day(late_utc, "America/Edmonton") == date(2026, 3, 10)


def test_calendar_day_parses_iso_strings():
    assert calendar_day("2026-03-10") == date(2026, 3, 10)
    assert calendar_day("2026-03-10T22:15:00Z", "UTC") == date(2026, 3, 10)
    assert calendar_day("2026-03-10T22:15:00+00:00", "Asia/Tokyo") == date(2026, 3, 11)


@pytest.mark.parametrize("value", [None, 12345, "", "not-a-date", "2026-13-40", object()])
def test_calendar_day_rejects_non_normalizable_values(value):
    with pytest.raises(InvalidState):
        calendar_day(value)


def test_unknown_timezone_is_invalid_state():
    with pytest.raises(InvalidState):
        calendar_day(datetime(2026, 3, 10, tzinfo=timezone.utc), "Mars/Olympus_Mons")


def test_is_today_and_is_yesterday_compare_calendar_keys():
    now = datetime(2026, 3, 10, 8, 0, tzinfo=timezone.utc)
    assert is_today(date(2026, 3, 10), now, "UTC")
    assert is_today(datetime(2026, 3, 10, 23, 59, tzinfo=timezone.utc), now, "UTC")
    assert not is_today(date(2026, 3, 9), now, "UTC")
    assert is_yesterday(date(2026, 3, 9), now, "UTC")
    assert not is_yesterday(date(2026, 3, 8), now, "UTC")


def test_yesterday_crosses_month_and_year_boundaries():
    assert is_yesterday(date(2026, 2, 28), datetime(2026, 3, 1, 12, 0), "UTC")
    assert is_yesterday(date(2025, 12, 31), datetime(2026, 1, 1, 0, 5), "UTC")


def test_day_window_is_half_open_single_day():
    assert day_window(date(2026, 12, 31)) == (date(2026, 12, 31), date(2027, 1, 1))


def test_parse_day_requires_yyyy_mm_dd():
    assert parse_day("2026-03-10") == date(2026, 3, 10)
    with pytest.raises(InvalidState):
        parse_day(None)
    with pytest.raises(InvalidState):
        parse_day("03/10/2026")
