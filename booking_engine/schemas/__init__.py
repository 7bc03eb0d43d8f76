"""
Pydantic schemas for request validation and API responses.
"""

from booking_engine.schemas.audit import AuditRecordRead
from booking_engine.schemas.availability import AvailabilityRead, AvailabilitySlotRead, BookedInterval
from booking_engine.schemas.booking import BookingCreate, BookingFilter, BookingRead, BookingUpdate
from booking_engine.schemas.resource import ResourceRead
from booking_engine.schemas.tenant import TenantSettings

__all__ = [
    "AuditRecordRead",
    "AvailabilityRead",
    "AvailabilitySlotRead",
    "BookedInterval",
    "BookingCreate",
    "BookingFilter",
    "BookingRead",
    "BookingUpdate",
    "ResourceRead",
    "TenantSettings",
]
