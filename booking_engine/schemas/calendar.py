"""
Calendar view Pydantic schemas.
"""

from datetime import date, datetime
from typing import List

from pydantic import BaseModel

from booking_engine.schemas.booking import BookingRead
from booking_engine.schemas.resource import ResourceRead


class CalendarPeriod(BaseModel):
    """The month shown, as a half-open UTC window [start, end)."""

    month: str
    start: datetime
    end: datetime
    timezone: str


class CalendarDay(BaseModel):
    day: date
    weekday: int
    bookings: List[BookingRead]


class CalendarSummary(BaseModel):
    total_bookings: int
    confirmed_bookings: int
    pending_bookings: int


class CalendarRead(BaseModel):
    period: CalendarPeriod
    bookings: List[BookingRead]
    resources: List[ResourceRead]
    days: List[CalendarDay]
    summary: CalendarSummary
