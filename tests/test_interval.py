"""Interval model: half-open overlap rule."""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from booking_engine.errors import InvalidInterval
from booking_engine.scheduling.interval import Interval, overlaps

pytestmark = pytest.mark.unit

BASE = datetime(2024, 8, 15, 0, 0, tzinfo=timezone.utc)


def minutes(start: int, end: int) -> Interval:
    return Interval(BASE + timedelta(minutes=start), BASE + timedelta(minutes=end))


def test_touching_intervals_do_not_overlap():
    assert overlaps(minutes(0, 60), minutes(60, 120)) is False
    assert overlaps(minutes(60, 120), minutes(0, 60)) is False


@pytest.mark.parametrize(
    "a,b,expected",
    [
        ((0, 60), (30, 90), True),
        ((0, 120), (30, 60), True),
        ((0, 60), (0, 60), True),
        ((0, 60), (61, 90), False),
        ((840, 900), (870, 930), True),
        ((840, 900), (900, 960), False),
    ],
)
def test_overlap_is_symmetric(a, b, expected):
    first, second = minutes(*a), minutes(*b)
    assert overlaps(first, second) is expected
    assert overlaps(second, first) is expected
    assert first.overlaps(second) is expected


@pytest.mark.parametrize("start,end", [(60, 60), (90, 60)])
def test_start_must_be_before_end(start, end):
    with pytest.raises(InvalidInterval) as exc_info:
        minutes(start, end)
    assert exc_info.value.code == "invalid_interval"
    assert "start_time" in exc_info.value.details


def test_naive_values_are_taken_as_utc():
    interval = Interval(datetime(2024, 8, 15, 14, 0), datetime(2024, 8, 15, 15, 0))
    assert interval.start.tzinfo is timezone.utc
    assert interval == Interval(BASE + timedelta(hours=14), BASE + timedelta(hours=15))


def test_other_offsets_are_normalised_to_utc():
    berlin = ZoneInfo("Europe/Berlin")
    interval = Interval(
        datetime(2024, 8, 15, 16, 0, tzinfo=berlin),
        datetime(2024, 8, 15, 17, 0, tzinfo=berlin),
    )
    assert interval.start == BASE + timedelta(hours=14)
    assert interval.start.utcoffset() == timedelta(0)


def test_contains_excludes_end():
    interval = minutes(0, 60)
    assert interval.contains(BASE)
    assert not interval.contains(BASE + timedelta(minutes=60))
    assert interval.duration == timedelta(hours=1)
    assert Interval.starting_at(BASE, 60) == interval
