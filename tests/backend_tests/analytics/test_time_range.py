from datetime import datetime, timedelta, timezone

import pytest

from backend.analytics import TimeRangeName, resolve_time_range

NOW = datetime(2024, 6, 15, 12, 30, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "range_name, expected_name, expected_lower_bound",
    [
        ("day", TimeRangeName.day, NOW - timedelta(days=1)),
        ("week", TimeRangeName.week, NOW - timedelta(days=7)),
        ("month", TimeRangeName.month, datetime(2024, 5, 15, 12, 30, tzinfo=timezone.utc)),
        ("year", TimeRangeName.year, datetime(2023, 6, 15, 12, 30, tzinfo=timezone.utc)),
    ],
)
def test_known_ranges(range_name, expected_name, expected_lower_bound):
    window = resolve_time_range(range_name, NOW)

    assert window.name == expected_name
    assert window.lower_bound == expected_lower_bound


@pytest.mark.parametrize("range_name", [None, "", "decade", "Week", " day"])
def test_unknown_range_falls_back_to_week(range_name):
    window = resolve_time_range(range_name, NOW)

    assert window.name == TimeRangeName.week
    assert window.lower_bound == NOW - timedelta(days=7)


def test_month_clamps_to_shorter_month():
    now = datetime(2024, 3, 31, 8, 0, tzinfo=timezone.utc)

    assert resolve_time_range("month", now).lower_bound == datetime(
        2024, 2, 29, 8, 0, tzinfo=timezone.utc
    )


def test_month_crosses_year_boundary():
    now = datetime(2024, 1, 10, tzinfo=timezone.utc)

    assert resolve_time_range("month", now).lower_bound == datetime(
        2023, 12, 10, tzinfo=timezone.utc
    )


def test_year_from_leap_day():
    now = datetime(2024, 2, 29, tzinfo=timezone.utc)

    assert resolve_time_range("year", now).lower_bound == datetime(
        2023, 2, 28, tzinfo=timezone.utc
    )


def test_resolution_is_pure():
    assert resolve_time_range("month", NOW) == resolve_time_range("month", NOW)
    # the reference instant is not modified
    assert NOW == datetime(2024, 6, 15, 12, 30, tzinfo=timezone.utc)


def test_window_is_frozen():
    window = resolve_time_range("day", NOW)

    with pytest.raises(Exception):
        window.lower_bound = NOW
