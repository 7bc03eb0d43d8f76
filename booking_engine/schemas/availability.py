"""
Availability Pydantic schemas.
"""

from datetime import date, datetime
from typing import List
from uuid import UUID

from pydantic import BaseModel


class AvailabilitySlotRead(BaseModel):
    """A candidate slot of the requested duration."""

    start_time: datetime
    end_time: datetime
    duration_minutes: int
    available: bool = True


class BookedInterval(BaseModel):
    """An active booking's interval, returned for display next to the slots."""

    start_time: datetime
    end_time: datetime


class AvailabilityRead(BaseModel):
    resource_id: UUID
    start_date: date
    end_date: date
    duration_minutes: int
    timezone: str
    slots: List[AvailabilitySlotRead]
    existing: List[BookedInterval]
