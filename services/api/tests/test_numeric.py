from datetime import date, datetime, timedelta, timezone

from blabberly.services.numeric import (
    MS_PER_DAY,
    Timestamp,
    clamp,
    engagement_units,
    hours_between,
    percent,
    recency_fraction,
    round_half_up,
    safe_number,
    to_millis,
)


def test_safe_number_rejects_non_finite_and_bool():
    assert safe_number(3) == 3
    assert safe_number(2.5) == 2.5
    assert safe_number(float("nan")) == 0
    assert safe_number(float("inf"), fallback=7) == 7
    assert safe_number(True) == 0
    assert safe_number("12") == 0
    assert safe_number(None, fallback=-1) == -1


def test_clamp():
    assert clamp(1.5) == 1.0
    assert clamp(-0.2) == 0.0
    assert clamp(0.4) == 0.4
    assert clamp(float("nan")) == 0.0
    assert clamp(7, 1, 5) == 5


def test_round_half_up_does_not_use_bankers_rounding():
    assert round_half_up(12.5) == 13
    assert round_half_up(2.5) == 3
    assert round_half_up(2.04, 1) == 2.0
    assert round_half_up(2.06, 1) == 2.1


def test_percent():
    assert percent(1, 3) == 33
    assert percent(2, 3) == 67
    assert percent(1, 0) == 0


def test_engagement_units_weights_comments_and_saves():
    assert engagement_units(10, 2, 1) == 17
    assert engagement_units() == 0


def test_hours_between():
    assert hours_between(0, 3 * 60 * 60 * 1000) == 3.0
    assert hours_between(MS_PER_DAY, 0) == -24.0


def test_recency_fraction():
    now = 1_000 * MS_PER_DAY
    assert recency_fraction(now, now) == 1.0
    assert recency_fraction(now - 365 * MS_PER_DAY, now) == 0.0
    assert recency_fraction(now - 400 * MS_PER_DAY, now) == 0.0
    assert recency_fraction(now - 3 * MS_PER_DAY, now, horizon_days=6) == 0.5
    # Future timestamps do not exceed 1
    assert recency_fraction(now + MS_PER_DAY, now) == 1.0


class TestTimestamp:
    def test_from_datetime_naive_is_utc(self):
        naive = datetime(2024, 1, 1, 0, 0)
        aware = datetime(2024, 1, 1, 0, 0, tzinfo=timezone.utc)
        assert Timestamp.from_datetime(naive) == Timestamp.from_datetime(aware)

    def test_from_date_is_midnight(self):
        ts = Timestamp.from_datetime(date(2024, 1, 2))
        assert ts.to_datetime() == datetime(2024, 1, 2, tzinfo=timezone.utc)

    def test_unknown_values(self):
        assert not Timestamp.coerce(None).is_known
        assert not Timestamp.coerce("yesterday").is_known
        assert not Timestamp.from_millis(-5).is_known

    def test_ordering(self):
        earlier = Timestamp.from_datetime(datetime(2024, 1, 1, tzinfo=timezone.utc))
        later = Timestamp.from_datetime(datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(hours=1))
        assert earlier < later


def test_to_millis_accepts_millis_capable_objects():
    class FirestoreLike:
        def toMillis(self):
            return 1234

    class Broken:
        def to_millis(self):
            raise ValueError("bad")

    class NotMaterialized:
        def toMillis(self):
            raise RuntimeError("not materialized")

    class LazyProxy:
        def __getattr__(self, name):
            raise KeyError(name)

    assert to_millis(FirestoreLike()) == 1234
    assert to_millis(Broken()) == 0
    assert to_millis(NotMaterialized()) == 0
    assert to_millis(LazyProxy()) == 0
    assert to_millis(1700000000000) == 1700000000000
    assert to_millis(True) == 0
