"""Numeric and temporal helpers shared by every scorer.

All helpers are total: they never raise on bad input and fall back to a
neutral value instead (0, the supplied fallback, or an unknown Timestamp).

Engagement unit (used everywhere):
    likes + comments * 2 + saves * 3

Recency fraction (linear decay):
    max(0, 1 - age_days / horizon_days)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time as dt_time, timezone, tzinfo
import math
import time
from typing import Any

MS_PER_HOUR = 60 * 60 * 1000
MS_PER_DAY = 24 * MS_PER_HOUR

# Recency horizon for place-level scoring (one year)
RECENCY_HORIZON_DAYS = 365


def current_millis() -> int:
    """Wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def safe_number(value: Any, fallback: float = 0) -> float:
    """Return `value` if it is a finite int/float, otherwise `fallback`.

    Booleans are rejected even though they subclass int.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return fallback
    if not math.isfinite(value):
        return fallback
    return value


def clamp(value: float, lo: float = 0.0, hi: float = 1.0) -> float:
    """Clamp `value` into [lo, hi]; non-numeric input collapses to `lo`."""
    value = safe_number(value, lo)
    return max(lo, min(hi, value))


def round_half_up(value: float, digits: int = 0) -> float:
    """Round half away from zero for positives (12.5 -> 13, 0.25 -> 0.3 at 1 digit).

    Python's round() uses banker's rounding which would flip ties downwards.
    """
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def percent(count: float, total: float) -> int:
    """Integer percentage of count/total, 0 when total is not positive."""
    if total <= 0:
        return 0
    return int(round_half_up(count / total * 100))


def engagement_units(likes: float = 0, comments: float = 0, saves: float = 0) -> float:
    """Weighted engagement: likes + comments*2 + saves*3."""
    return safe_number(likes) + safe_number(comments) * 2 + safe_number(saves) * 3


def hours_between(earlier_ms: int, later_ms: int) -> float:
    return (later_ms - earlier_ms) / MS_PER_HOUR


def recency_fraction(
    created_ms: int,
    now_ms: int,
    horizon_days: float = RECENCY_HORIZON_DAYS,
) -> float:
    """Linear freshness in [0, 1]: 1 for brand new, 0 at or beyond the horizon."""
    if horizon_days <= 0:
        return 0.0
    age_days = (now_ms - created_ms) / MS_PER_DAY
    return min(1.0, max(0.0, 1 - age_days / horizon_days))


@dataclass(frozen=True, order=True)
class Timestamp:
    """Canonical point in time for engagement records (epoch milliseconds).

    Build it at the data-source boundary with `from_millis`, `from_datetime`
    or `coerce`; scorers only ever read `millis`.
    """

    millis: int = 0

    @classmethod
    def from_millis(cls, millis: float) -> Timestamp:
        value = safe_number(millis)
        return cls(int(value) if value > 0 else 0)

    @classmethod
    def from_datetime(cls, value: datetime | date) -> Timestamp:
        """Wall-clock constructor. Naive datetimes and plain dates are taken as UTC."""
        if not isinstance(value, datetime):
            value = datetime.combine(value, dt_time.min)
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return cls.from_millis(value.timestamp() * 1000)

    @classmethod
    def coerce(cls, value: Any) -> Timestamp:
        """Best-effort conversion of whatever the store handed us."""
        return cls.from_millis(to_millis(value))

    @property
    def is_known(self) -> bool:
        return self.millis > 0

    def to_datetime(self, tz: tzinfo = timezone.utc) -> datetime:
        return datetime.fromtimestamp(self.millis / 1000, tz=tz)


UNKNOWN_TIME = Timestamp()


def to_millis(value: Any) -> int:
    """Epoch milliseconds from a number, datetime/date, Timestamp or millis-capable object.

    Returns 0 for None or anything unrecognized.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, Timestamp):
        return value.millis
    if isinstance(value, (int, float)):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        try:
            return int(value.timestamp() * 1000)
        except (OverflowError, OSError, ValueError):
            return 0
    if isinstance(value, date):
        return to_millis(datetime.combine(value, dt_time.min))
    # Foreign timestamp objects may fail in arbitrary ways; treat those as unknown.
    for method_name in ("to_millis", "toMillis"):
        try:
            method = getattr(value, method_name, None)
            if callable(method):
                return int(safe_number(method()))
        except Exception:
            return 0
    return 0
