"""
Conflict detection for a resource and a candidate interval.
"""

from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from booking_engine.errors import ResourceNotFound
from booking_engine.models.resource import Resource
from booking_engine.repositories.booking_repository import BookingRepository
from booking_engine.repositories.resource_repository import ResourceRepository
from booking_engine.scheduling.interval import Interval


class ConflictDetector:
    """
    Read-only checks against the bookings of one tenant.

    Only pending and confirmed bookings take part; cancelled and completed
    bookings never conflict.
    """

    def __init__(self, db: AsyncSession):
        self.resources = ResourceRepository(db)
        self.bookings = BookingRepository(db)

    async def require_resource(
        self,
        tenant_id: UUID,
        resource_id: UUID,
        lock: bool = False,
    ) -> Resource:
        """
        Load an active resource of the tenant.

        ``lock`` takes a row lock held until the caller's transaction ends.
        """
        resource = await self.resources.get_active(tenant_id, resource_id, for_update=lock)
        if resource is None:
            raise ResourceNotFound()
        return resource

    async def lock_resource(self, tenant_id: UUID, resource_id: UUID) -> None:
        """
        Lock the resource row of an existing booking.

        Deactivating a resource leaves its bookings editable, so the active
        flag is not checked here.
        """
        await self.resources.get_for_update(tenant_id, resource_id)

    async def overlaps_active_booking(
        self,
        tenant_id: UUID,
        resource_id: UUID,
        interval: Interval,
        exclude_booking_id: Optional[UUID] = None,
    ) -> bool:
        return await self.bookings.has_active_overlap(
            tenant_id,
            resource_id,
            interval,
            exclude_booking_id=exclude_booking_id,
        )

    async def has_conflict(
        self,
        tenant_id: UUID,
        resource_id: UUID,
        interval: Interval,
        exclude_booking_id: Optional[UUID] = None,
    ) -> bool:
        """
        True iff an active booking on the resource overlaps ``interval``.

        Raises:
            ResourceNotFound: the resource is missing, inactive or owned by another tenant
        """
        await self.require_resource(tenant_id, resource_id)
        return await self.overlaps_active_booking(tenant_id, resource_id, interval, exclude_booking_id)
