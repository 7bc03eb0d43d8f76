"""
Booking repository - database operations for Booking.
"""

import uuid
from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID

from sqlalchemy import and_, exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from booking_engine.models.booking import Booking
from booking_engine.schemas.booking import BookingCreate, BookingFilter
from booking_engine.scheduling.interval import Interval
from booking_engine.scheduling.transitions import ACTIVE_STATUSES, BookingStatus
from booking_engine.utils.time import utc_now


def overlapping(interval: Interval):
    """SQL form of Interval.overlaps against the booking columns."""
    return and_(
        Booking.start_time < interval.end,
        Booking.end_time > interval.start,
    )


class BookingRepository:
    """Repository for Booking database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(
        self,
        tenant_id: UUID,
        booking_id: UUID,
        for_update: bool = False,
    ) -> Optional[Booking]:
        """Get a booking by ID for a specific tenant."""
        query = select(Booking).where(
            Booking.id == booking_id,
            Booking.tenant_id == tenant_id,
        )
        if for_update:
            # Re-read the row even if it is already in the identity map
            query = query.with_for_update().execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def list(self, tenant_id: UUID, filters: BookingFilter) -> List[Booking]:
        """List bookings for a tenant with filters, ordered by start time."""
        query = select(Booking).where(Booking.tenant_id == tenant_id)

        if filters.resource_id is not None:
            query = query.where(Booking.resource_id == filters.resource_id)
        if filters.user_id is not None:
            query = query.where(Booking.user_id == filters.user_id)
        if filters.status is not None:
            query = query.where(Booking.status == filters.status.value)
        if filters.start_date is not None:
            query = query.where(Booking.start_time >= filters.start_date)
        if filters.end_date is not None:
            query = query.where(Booking.end_time <= filters.end_date)

        query = query.order_by(Booking.start_time.asc(), Booking.id.asc())
        query = query.limit(filters.limit).offset(filters.offset)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def has_active_overlap(
        self,
        tenant_id: UUID,
        resource_id: UUID,
        interval: Interval,
        exclude_booking_id: Optional[UUID] = None,
    ) -> bool:
        """True if an active booking on the resource overlaps the interval."""
        conditions = [
            Booking.tenant_id == tenant_id,
            Booking.resource_id == resource_id,
            Booking.status.in_(ACTIVE_STATUSES),
            overlapping(interval),
        ]
        if exclude_booking_id is not None:
            conditions.append(Booking.id != exclude_booking_id)

        result = await self.db.execute(select(exists().where(*conditions)))
        return bool(result.scalar())

    async def list_active_in_window(
        self,
        tenant_id: UUID,
        resource_id: UUID,
        window: Interval,
    ) -> List[Booking]:
        """Active bookings on the resource that overlap the window."""
        result = await self.db.execute(
            select(Booking)
            .where(
                Booking.tenant_id == tenant_id,
                Booking.resource_id == resource_id,
                Booking.status.in_(ACTIVE_STATUSES),
                overlapping(window),
            )
            .order_by(Booking.start_time.asc())
        )
        return list(result.scalars().all())

    async def list_in_window(
        self,
        tenant_id: UUID,
        window: Interval,
        statuses: Sequence[str],
        resource_id: Optional[UUID] = None,
        user_id: Optional[UUID] = None,
    ) -> List[Booking]:
        """Bookings in the given statuses that overlap the window, ordered by start time."""
        query = select(Booking).where(
            Booking.tenant_id == tenant_id,
            Booking.status.in_(statuses),
            overlapping(window),
        )
        if resource_id is not None:
            query = query.where(Booking.resource_id == resource_id)
        if user_id is not None:
            query = query.where(Booking.user_id == user_id)

        result = await self.db.execute(query.order_by(Booking.start_time.asc(), Booking.id.asc()))
        return list(result.scalars().all())

    async def create(
        self,
        tenant_id: UUID,
        data: BookingCreate,
        interval: Interval,
    ) -> Booking:
        """Create a new booking in pending status."""
        booking = Booking(
            id=uuid.uuid4(),
            tenant_id=tenant_id,
            resource_id=data.resource_id,
            user_id=data.user_id,
            title=data.title,
            description=data.description,
            start_time=interval.start,
            end_time=interval.end,
            status=BookingStatus.PENDING.value,
            external_reference=data.external_reference,
            booking_metadata=data.metadata,
        )
        self.db.add(booking)
        await self.db.flush()
        return booking

    async def apply_changes(self, booking: Booking, changes: Dict[str, Any]) -> Booking:
        """Apply column changes to a booking and stamp updated_at."""
        for field, value in changes.items():
            setattr(booking, field, value)

        booking.updated_at = utc_now()
        await self.db.flush()
        return booking
