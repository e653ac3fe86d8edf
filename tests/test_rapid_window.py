"""Tests for weekly rapid window arithmetic."""

from datetime import datetime, timedelta

import pytest

from conftest import MONDAY
from rss_downloader.rapid_window import (
    WEEK,
    is_rapid,
    last_rapid_start,
    next_rapid_start,
    weekday,
)

HOUR = 3600


def test_weekday_counts_from_sunday():
    assert weekday(MONDAY) == 1
    assert weekday(MONDAY - timedelta(days=1)) == 0
    assert weekday(MONDAY + timedelta(days=5)) == 6


def test_last_rapid_start_earlier_in_week():
    thursday = MONDAY + timedelta(days=3, hours=15)
    assert last_rapid_start(thursday, 1, 0) == MONDAY


def test_last_rapid_start_later_weekday_goes_back_a_week():
    # Saturday's anchor hasn't come yet on Monday, so use last Saturday.
    start = last_rapid_start(MONDAY + timedelta(hours=12), 6, 8 * HOUR)
    assert start == datetime(2026, 2, 14, 8, 0)


def test_last_rapid_start_anchor_day_before_anchor_time():
    reference = MONDAY + timedelta(hours=9)
    assert last_rapid_start(reference, 1, 10 * HOUR) == datetime(2026, 2, 9, 10, 0)


def test_last_rapid_start_anchor_day_after_anchor_time():
    reference = MONDAY + timedelta(hours=11)
    assert last_rapid_start(reference, 1, 10 * HOUR) == datetime(2026, 2, 16, 10, 0)


def test_last_rapid_start_exactly_at_anchor():
    anchor = datetime(2026, 2, 16, 10, 0)
    assert last_rapid_start(anchor, 1, 10 * HOUR) == anchor


@pytest.mark.parametrize("day_of_week", range(7))
@pytest.mark.parametrize(
    "reference",
    [
        MONDAY,
        MONDAY + timedelta(hours=23, minutes=59, seconds=59),
        datetime(2026, 2, 19, 7, 30, 12, 500),
        datetime(2026, 2, 22, 23, 0),
    ],
)
def test_last_rapid_start_within_one_week(reference, day_of_week):
    anchor = 7 * HOUR + 1800
    start = last_rapid_start(reference, day_of_week, anchor)
    assert start <= reference < start + WEEK
    assert weekday(start) == day_of_week
    assert next_rapid_start(reference, day_of_week, anchor) == start + WEEK


def test_is_rapid_includes_start_excludes_end():
    assert is_rapid(MONDAY, 1, 0, HOUR)
    assert is_rapid(MONDAY + timedelta(seconds=HOUR - 1), 1, 0, HOUR)
    assert not is_rapid(MONDAY + timedelta(seconds=HOUR), 1, 0, HOUR)
    assert not is_rapid(MONDAY - timedelta(seconds=1), 1, 0, HOUR)


def test_is_rapid_mid_window():
    assert is_rapid(MONDAY + timedelta(minutes=30), 1, 0, HOUR)
    assert not is_rapid(MONDAY + timedelta(days=2), 1, 0, HOUR)
