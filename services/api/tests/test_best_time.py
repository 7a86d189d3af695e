"""Tests for best-time-to-visit histograms."""

from zoneinfo import ZoneInfo

import pytest

from blabberly.services.best_time import DAY_LABELS, TIME_LABELS, analyze_best_time, time_bucket

from helpers import make_post


@pytest.mark.parametrize(
    "hour,expected",
    [(0, 3), (5, 3), (6, 0), (11, 0), (12, 1), (16, 1), (17, 2), (21, 2), (22, 3), (23, 3)],
)
def test_time_bucket_boundaries(hour: int, expected: int):
    assert time_bucket(hour) == expected


def test_no_timestamps_returns_none():
    assert analyze_best_time([]) is None
    assert analyze_best_time([{"likes": 3}]) is None


def test_distribution_in_utc():
    # NOW is Wednesday 12:00 UTC
    posts = [
        make_post(id="1", hours_ago=0),  # Wed 12:00, Afternoon
        make_post(id="2", hours_ago=1),  # Wed 11:00, Morning
        make_post(id="3", hours_ago=24),  # Tue 12:00, Afternoon
    ]
    result = analyze_best_time(posts)

    assert result is not None
    assert result.best_day == "Wed"
    assert result.best_time == "Afternoon"
    assert result.sample_size == 3
    assert [b.label for b in result.day_distribution] == list(DAY_LABELS)
    assert [b.label for b in result.time_distribution] == list(TIME_LABELS)

    by_day = {b.label: b for b in result.day_distribution}
    assert by_day["Wed"].count == 2
    assert by_day["Wed"].percent == 67
    assert by_day["Tue"].percent == 33
    assert by_day["Sun"].count == 0


def test_ties_pick_earliest_bucket():
    posts = [
        make_post(id="1", hours_ago=24),  # Tue Afternoon
        make_post(id="2", hours_ago=1),  # Wed Morning
    ]
    result = analyze_best_time(posts)
    assert result.best_day == "Tue"
    assert result.best_time == "Morning"


def test_timezone_shifts_buckets():
    # 12:00 UTC is 07:00 in Chicago during daylight saving time
    result = analyze_best_time([make_post(hours_ago=0)], ZoneInfo("America/Chicago"))
    assert result.best_time == "Morning"
    assert result.best_day == "Wed"
