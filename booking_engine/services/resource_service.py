"""
Resource service - read access to the tenant's bookable resources.
"""

from typing import List
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from booking_engine.errors import ResourceNotFound
from booking_engine.models.resource import Resource
from booking_engine.repositories.resource_repository import ResourceRepository


class ResourceService:
    """Service for Resource lookups."""

    def __init__(self, db: AsyncSession):
        self.repository = ResourceRepository(db)

    async def list_resources(self, tenant_id: UUID) -> List[Resource]:
        return await self.repository.list_active(tenant_id)

    async def get_resource(self, tenant_id: UUID, resource_id: UUID) -> Resource:
        resource = await self.repository.get_active(tenant_id, resource_id)
        if resource is None:
            raise ResourceNotFound()
        return resource
