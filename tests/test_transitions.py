"""Booking status machine."""

import pytest

from booking_engine.errors import InvalidTransition
from booking_engine.scheduling.transitions import (
    BookingStatus,
    can_transition,
    ensure_transition,
    is_active,
    is_terminal,
)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "current,target",
    [
        ("pending", "confirmed"),
        ("pending", "cancelled"),
        ("confirmed", "completed"),
        ("confirmed", "cancelled"),
        ("pending", "pending"),
        ("cancelled", "cancelled"),
    ],
)
def test_allowed_transitions(current, target):
    assert can_transition(current, target)
    ensure_transition(current, target)


@pytest.mark.parametrize(
    "current,target",
    [
        ("pending", "completed"),
        ("confirmed", "pending"),
        ("cancelled", "pending"),
        ("cancelled", "confirmed"),
        ("completed", "cancelled"),
        ("completed", "pending"),
    ],
)
def test_rejected_transitions(current, target):
    assert not can_transition(current, target)
    with pytest.raises(InvalidTransition) as exc_info:
        ensure_transition(current, target)
    assert exc_info.value.details == {"from": current, "to": target}


def test_enum_and_string_forms_are_interchangeable():
    assert can_transition(BookingStatus.PENDING, "confirmed")
    assert is_active(BookingStatus.CONFIRMED)
    assert is_terminal("completed")
    assert not is_terminal(BookingStatus.PENDING)
