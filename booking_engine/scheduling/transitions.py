"""
Booking status machine.

pending -> confirmed -> completed, and pending|confirmed -> cancelled.
Nothing leaves cancelled or completed.
"""

from enum import Enum

from booking_engine.errors import InvalidTransition


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


# Statuses that hold the resource and take part in conflict checks
ACTIVE_STATUSES = (BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value)
TERMINAL_STATUSES = (BookingStatus.CANCELLED.value, BookingStatus.COMPLETED.value)

ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    BookingStatus.PENDING.value: frozenset({BookingStatus.CONFIRMED.value, BookingStatus.CANCELLED.value}),
    BookingStatus.CONFIRMED.value: frozenset({BookingStatus.COMPLETED.value, BookingStatus.CANCELLED.value}),
    BookingStatus.CANCELLED.value: frozenset(),
    BookingStatus.COMPLETED.value: frozenset(),
}


def _value(status) -> str:
    return status.value if isinstance(status, BookingStatus) else str(status)


def is_terminal(status) -> bool:
    return _value(status) in TERMINAL_STATUSES


def is_active(status) -> bool:
    return _value(status) in ACTIVE_STATUSES


def can_transition(current, target) -> bool:
    """Same-status is a no-op and always allowed."""
    current, target = _value(current), _value(target)
    if current == target:
        return True
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


def ensure_transition(current, target) -> None:
    if not can_transition(current, target):
        raise InvalidTransition(
            f"Cannot change booking status from {_value(current)} to {_value(target)}",
            details={"from": _value(current), "to": _value(target)},
        )
