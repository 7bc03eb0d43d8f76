"""
Slot planning over a day range.

Pure functions: everything the planner needs (existing bookings, the reference
instant, the policy window) is passed in, so the same inputs always produce the
same slots.
"""

import bisect
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Iterator, List, Optional, Sequence

from booking_engine.errors import InvalidDuration, InvalidRange
from booking_engine.scheduling.interval import Interval
from booking_engine.utils.time import ensure_utc

DEFAULT_STRIDE_MINUTES = 30


@dataclass(frozen=True)
class BusinessHours:
    """Policy window on the local clock: start hour inclusive, end hour exclusive."""

    start_hour: int = 9
    end_hour: int = 18

    def admits(self, local_start: datetime) -> bool:
        return self.start_hour <= local_start.hour < self.end_hour


@dataclass(frozen=True)
class Slot:
    start: datetime
    end: datetime
    available: bool = True


def day_range_window(start_date: date, end_date: date, tz: tzinfo) -> Optional[Interval]:
    """
    UTC window covering the local days [start_date, end_date).

    Returns None when the range spans zero days.
    """
    if start_date > end_date:
        raise InvalidRange(
            details={"start_date": start_date.isoformat(), "end_date": end_date.isoformat()},
        )
    if start_date == end_date:
        return None
    window_start = datetime.combine(start_date, time.min, tzinfo=tz)
    window_end = datetime.combine(end_date, time.min, tzinfo=tz)
    return Interval(window_start, window_end)


def candidate_starts(window: Interval, stride_minutes: int) -> Iterator[datetime]:
    """Slot starts at a fixed stride from the window start, independent of slot length."""
    step = timedelta(minutes=stride_minutes)
    current = window.start
    while current < window.end:
        yield current
        current += step


def _overlaps_any(candidate: Interval, intervals: Sequence[Interval]) -> bool:
    return any(candidate.overlaps(existing) for existing in intervals)


def _fits_between(accepted: List[Slot], candidate: Slot) -> bool:
    """True when candidate does not overlap any already accepted slot (kept sorted)."""
    starts = [slot.start for slot in accepted]
    index = bisect.bisect_left(starts, candidate.start)
    if index > 0 and accepted[index - 1].end > candidate.start:
        return False
    if index < len(accepted) and accepted[index].start < candidate.end:
        return False
    return True


def plan_slots(
    start_date: date,
    end_date: date,
    duration_minutes: int,
    now: datetime,
    existing: Sequence[Interval],
    business_hours: BusinessHours,
    tz: tzinfo,
    stride_minutes: int = DEFAULT_STRIDE_MINUTES,
    include_unavailable: bool = False,
) -> List[Slot]:
    """
    Enumerate bookable slots of ``duration_minutes`` in ascending start order.

    Candidates are dropped when they end at or before ``now`` or start outside
    the business hours. Free candidates are taken greedily, so no two returned
    slots overlap. With ``include_unavailable`` the conflicting candidates that
    fit between the free ones are returned too, flagged ``available=False``.
    """
    window = day_range_window(start_date, end_date, tz)
    if duration_minutes is None or duration_minutes <= 0:
        raise InvalidDuration(details={"duration_minutes": duration_minutes})
    if window is None:
        return []

    now = ensure_utc(now)
    duration = timedelta(minutes=duration_minutes)
    eligible: List[Slot] = []
    for start in candidate_starts(window, stride_minutes):
        end = start + duration
        if end <= now:
            continue
        if not business_hours.admits(start.astimezone(tz)):
            continue
        candidate = Interval(start, end)
        eligible.append(Slot(candidate.start, candidate.end, not _overlaps_any(candidate, existing)))

    slots: List[Slot] = []
    cursor: Optional[datetime] = None
    for slot in eligible:
        if not slot.available:
            continue
        if cursor is not None and slot.start < cursor:
            continue
        slots.append(slot)
        cursor = slot.end

    if include_unavailable:
        for slot in eligible:
            if slot.available:
                continue
            if _fits_between(slots, slot):
                bisect.insort(slots, slot, key=lambda item: item.start)

    return slots
