"""
Half-open time intervals.

``overlaps`` is the only overlap predicate in the engine; the conflict query and
the availability planner both express exactly this rule.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from booking_engine.errors import InvalidInterval
from booking_engine.utils.time import ensure_utc


@dataclass(frozen=True, order=True)
class Interval:
    """A time range [start, end) in UTC; end is excluded."""

    start: datetime
    end: datetime

    def __post_init__(self):
        start = ensure_utc(self.start)
        end = ensure_utc(self.end)
        if start >= end:
            raise InvalidInterval(
                details={"start_time": start.isoformat(), "end_time": end.isoformat()},
            )
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)

    @classmethod
    def starting_at(cls, start: datetime, minutes: int) -> "Interval":
        return cls(start, start + timedelta(minutes=minutes))

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def overlaps(self, other: "Interval") -> bool:
        return overlaps(self, other)

    def contains(self, instant: datetime) -> bool:
        return self.start <= ensure_utc(instant) < self.end


def overlaps(a: Interval, b: Interval) -> bool:
    """Strict on both sides: intervals that only touch do not overlap."""
    return a.start < b.end and b.start < a.end
