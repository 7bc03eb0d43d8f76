"""
Pure scheduling logic: intervals, status transitions and slot planning.
"""

from booking_engine.scheduling.interval import Interval, overlaps
from booking_engine.scheduling.planner import BusinessHours, Slot, plan_slots
from booking_engine.scheduling.transitions import (
    ACTIVE_STATUSES,
    TERMINAL_STATUSES,
    BookingStatus,
    can_transition,
    ensure_transition,
    is_terminal,
)

__all__ = [
    "Interval",
    "overlaps",
    "BusinessHours",
    "Slot",
    "plan_slots",
    "ACTIVE_STATUSES",
    "TERMINAL_STATUSES",
    "BookingStatus",
    "can_transition",
    "ensure_transition",
    "is_terminal",
]
