"""
Models package.

Import all models here so they are registered with SQLAlchemy.
This file also makes it easy to import models from one place.
"""

from booking_engine.models.tenant import Tenant
from booking_engine.models.resource import Resource
from booking_engine.models.booking import Booking
from booking_engine.models.booking_history import BookingHistory

# Export all models
__all__ = [
    "Tenant",
    "Resource",
    "Booking",
    "BookingHistory",
]
