"""
Availability planning for one resource over a range of days.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from booking_engine.core.config import settings
from booking_engine.core.tenant_context import TenantContext
from booking_engine.errors import InvalidDuration, InvalidRange
from booking_engine.repositories.booking_repository import BookingRepository
from booking_engine.schemas.availability import AvailabilityRead, AvailabilitySlotRead, BookedInterval
from booking_engine.scheduling.interval import Interval
from booking_engine.scheduling.planner import day_range_window, plan_slots
from booking_engine.services.conflict_detector import ConflictDetector
from booking_engine.utils.time import utc_now

logger = logging.getLogger(__name__)


class AvailabilityPlanner:
    """Reads a consistent snapshot of active bookings and plans slots against it."""

    def __init__(self, db: AsyncSession):
        self.detector = ConflictDetector(db)
        self.bookings = BookingRepository(db)

    async def plan_availability(
        self,
        tenant: TenantContext,
        resource_id: UUID,
        start_date: date,
        end_date: date,
        duration_minutes: Optional[int] = None,
        now: Optional[datetime] = None,
        include_unavailable: bool = False,
    ) -> AvailabilityRead:
        """
        Bookable slots of ``duration_minutes`` on the local days [start_date, end_date).

        Days are interpreted in the tenant timezone and only slot starts inside
        the tenant's business hours are offered.

        Raises:
            ResourceNotFound: resource missing, inactive or out of scope
            InvalidRange: start_date after end_date, or a range that is too long
            InvalidDuration: duration_minutes is not positive
        """
        await self.detector.require_resource(tenant.tenant_id, resource_id)

        if duration_minutes is None:
            duration_minutes = settings.DEFAULT_SLOT_DURATION_MINUTES
        tz = tenant.settings.tzinfo

        window = day_range_window(start_date, end_date, tz)
        if (end_date - start_date).days > settings.MAX_AVAILABILITY_DAYS:
            raise InvalidRange(
                f"Date range cannot exceed {settings.MAX_AVAILABILITY_DAYS} days",
                details={"start_date": start_date.isoformat(), "end_date": end_date.isoformat()},
            )
        if duration_minutes <= 0:
            raise InvalidDuration(details={"duration_minutes": duration_minutes})

        blocking = []
        existing = []
        if window is not None:
            # Slots starting late in the window may run past its end
            horizon = Interval(window.start, window.end + timedelta(minutes=duration_minutes))
            blocking = await self.bookings.list_active_in_window(tenant.tenant_id, resource_id, horizon)
            existing = [booking for booking in blocking if booking.start_time < window.end]

        slots = plan_slots(
            start_date,
            end_date,
            duration_minutes,
            now=now or utc_now(),
            existing=[Interval(booking.start_time, booking.end_time) for booking in blocking],
            business_hours=tenant.settings.policy_window,
            tz=tz,
            stride_minutes=settings.SLOT_STRIDE_MINUTES,
            include_unavailable=include_unavailable,
        )

        logger.debug(
            "Planned %d slots for resource %s (tenant %s) over %s..%s",
            len(slots),
            resource_id,
            tenant.tenant_id,
            start_date,
            end_date,
        )

        return AvailabilityRead(
            resource_id=resource_id,
            start_date=start_date,
            end_date=end_date,
            duration_minutes=duration_minutes,
            timezone=tenant.settings.timezone,
            slots=[
                AvailabilitySlotRead(
                    start_time=slot.start,
                    end_time=slot.end,
                    duration_minutes=duration_minutes,
                    available=slot.available,
                )
                for slot in slots
            ],
            existing=[
                BookedInterval(start_time=booking.start_time, end_time=booking.end_time)
                for booking in existing
            ],
        )
