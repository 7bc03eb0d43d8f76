"""
Month calendar of a tenant's bookings.
"""

import logging
import re
from datetime import date, datetime, time, timedelta
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from booking_engine.core.tenant_context import TenantContext
from booking_engine.errors import InvalidRange
from booking_engine.models.booking import Booking
from booking_engine.repositories.booking_repository import BookingRepository
from booking_engine.repositories.resource_repository import ResourceRepository
from booking_engine.schemas.booking import BookingRead
from booking_engine.schemas.calendar import CalendarDay, CalendarPeriod, CalendarRead, CalendarSummary
from booking_engine.schemas.resource import ResourceRead
from booking_engine.scheduling.interval import Interval
from booking_engine.scheduling.transitions import BookingStatus
from booking_engine.utils.time import utc_now

logger = logging.getLogger(__name__)

MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")

# Cancelled bookings are left off the calendar
CALENDAR_STATUSES = (
    BookingStatus.PENDING.value,
    BookingStatus.CONFIRMED.value,
    BookingStatus.COMPLETED.value,
)


def parse_month(value: str) -> Tuple[int, int]:
    """Parse ``YYYY-MM`` into (year, month)."""
    match = MONTH_PATTERN.match(value)
    if match is None or not 1 <= int(match.group(2)) <= 12:
        raise InvalidRange("Invalid month format. Use YYYY-MM format.", details={"month": value})
    return int(match.group(1)), int(match.group(2))


def month_days(year: int, month: int) -> List[date]:
    first = date(year, month, 1)
    following = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return [first + timedelta(days=offset) for offset in range((following - first).days)]


class CalendarService:
    """Builds the month view: bookings, resources, a per-day grid and counts."""

    def __init__(self, db: AsyncSession):
        self.bookings = BookingRepository(db)
        self.resources = ResourceRepository(db)

    async def get_calendar(
        self,
        tenant: TenantContext,
        month: Optional[str] = None,
        resource_id: Optional[UUID] = None,
        now: Optional[datetime] = None,
    ) -> CalendarRead:
        """
        Calendar for one month in the tenant timezone, defaulting to the current month.

        Non-cancelled bookings overlapping the month are listed; users who may
        not see every booking only get their own.

        Raises:
            InvalidRange: month is not YYYY-MM
        """
        tz = tenant.settings.tzinfo
        if month is None:
            local_now = (now or utc_now()).astimezone(tz)
            year, month_number = local_now.year, local_now.month
        else:
            year, month_number = parse_month(month)

        days = month_days(year, month_number)
        boundaries = [datetime.combine(day, time.min, tzinfo=tz) for day in days]
        boundaries.append(datetime.combine(days[-1] + timedelta(days=1), time.min, tzinfo=tz))
        window = Interval(boundaries[0], boundaries[-1])

        user_id = None if tenant.sees_all_bookings else tenant.user_id
        bookings = await self.bookings.list_in_window(
            tenant.tenant_id,
            window,
            CALENDAR_STATUSES,
            resource_id=resource_id,
            user_id=user_id,
        )
        resources = await self.resources.list_active(tenant.tenant_id)

        booking_reads = [BookingRead.model_validate(booking) for booking in bookings]
        grid = [
            CalendarDay(
                day=day,
                weekday=day.weekday(),
                bookings=[
                    read
                    for booking, read in zip(bookings, booking_reads)
                    if _overlaps_day(booking, boundaries[index], boundaries[index + 1])
                ],
            )
            for index, day in enumerate(days)
        ]

        logger.debug(
            "Calendar %04d-%02d for tenant %s: %d bookings",
            year,
            month_number,
            tenant.tenant_id,
            len(bookings),
        )

        return CalendarRead(
            period=CalendarPeriod(
                month=f"{year:04d}-{month_number:02d}",
                start=window.start,
                end=window.end,
                timezone=tenant.settings.timezone,
            ),
            bookings=booking_reads,
            resources=[ResourceRead.model_validate(resource) for resource in resources],
            days=grid,
            summary=CalendarSummary(
                total_bookings=len(bookings),
                confirmed_bookings=sum(1 for b in bookings if b.status == BookingStatus.CONFIRMED.value),
                pending_bookings=sum(1 for b in bookings if b.status == BookingStatus.PENDING.value),
            ),
        )


def _overlaps_day(booking: Booking, day_start: datetime, day_end: datetime) -> bool:
    return Interval(booking.start_time, booking.end_time).overlaps(Interval(day_start, day_end))
