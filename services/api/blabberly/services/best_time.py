"""Best time to visit: day-of-week and time-of-day histograms of post times."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import timezone, tzinfo
from typing import Any

from blabberly.services.numeric import percent
from blabberly.services.records import EngagementRecord, as_records

# Sunday-first so bucket index == (isoweekday % 7)
DAY_LABELS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
TIME_LABELS = ("Morning", "Afternoon", "Evening", "Late Night")


@dataclass(frozen=True)
class Bucket:
    label: str
    count: int
    percent: int


@dataclass(frozen=True)
class BestTimeAnalysis:
    best_day: str
    best_time: str
    day_distribution: list[Bucket]
    time_distribution: list[Bucket]
    sample_size: int


def time_bucket(hour: int) -> int:
    """Morning [6,12), Afternoon [12,17), Evening [17,22), Late Night otherwise."""
    if 6 <= hour < 12:
        return 0
    if 12 <= hour < 17:
        return 1
    if 17 <= hour < 22:
        return 2
    return 3


def _first_max(counts: list[int]) -> int:
    return counts.index(max(counts))


def analyze_best_time(
    posts: Iterable[EngagementRecord | Mapping[str, Any]] | None,
    tz: tzinfo = timezone.utc,
) -> BestTimeAnalysis | None:
    """Build posting histograms.

    Returns None when no post has a usable timestamp; callers must handle that.
    """
    day_counts = [0] * len(DAY_LABELS)
    time_counts = [0] * len(TIME_LABELS)
    valid = 0

    for post in as_records(posts):
        if not post.created_at.is_known:
            continue
        try:
            moment = post.created_at.to_datetime(tz)
        except (OverflowError, OSError, ValueError):
            continue
        day_counts[moment.isoweekday() % 7] += 1
        time_counts[time_bucket(moment.hour)] += 1
        valid += 1

    if valid == 0:
        return None

    return BestTimeAnalysis(
        best_day=DAY_LABELS[_first_max(day_counts)],
        best_time=TIME_LABELS[_first_max(time_counts)],
        day_distribution=[
            Bucket(label=label, count=count, percent=percent(count, valid))
            for label, count in zip(DAY_LABELS, day_counts)
        ],
        time_distribution=[
            Bucket(label=label, count=count, percent=percent(count, valid))
            for label, count in zip(TIME_LABELS, time_counts)
        ],
        sample_size=valid,
    )
