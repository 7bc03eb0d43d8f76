"""
Resource repository - database operations for Resource.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from booking_engine.models.resource import Resource


class ResourceRepository:
    """Repository for Resource database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_active(
        self,
        tenant_id: UUID,
        resource_id: UUID,
        for_update: bool = False,
    ) -> Optional[Resource]:
        """
        Get an active resource by ID for a specific tenant.

        With ``for_update`` the row stays locked until the transaction ends,
        which serializes booking writes against the same resource.
        """
        query = select(Resource).where(
            Resource.id == resource_id,
            Resource.tenant_id == tenant_id,
            Resource.is_active.is_(True),
        )
        if for_update:
            query = query.with_for_update()
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_for_update(self, tenant_id: UUID, resource_id: UUID) -> Optional[Resource]:
        """Lock a resource row of the tenant, active or not."""
        result = await self.db.execute(
            select(Resource)
            .where(Resource.id == resource_id, Resource.tenant_id == tenant_id)
            .with_for_update()
        )
        return result.scalar_one_or_none()

    async def list_active(self, tenant_id: UUID) -> List[Resource]:
        """List active resources for a tenant, ordered by name."""
        result = await self.db.execute(
            select(Resource)
            .where(
                Resource.tenant_id == tenant_id,
                Resource.is_active.is_(True),
            )
            .order_by(Resource.name.asc())
        )
        return list(result.scalars().all())
