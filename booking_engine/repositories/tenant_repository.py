"""
Tenant repository - read-only lookups used to resolve the caller's tenant.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from booking_engine.models.tenant import Tenant


class TenantRepository:
    """Repository for Tenant database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_active_by_api_key(self, api_key: str) -> Optional[Tenant]:
        """Get an active tenant by its API key."""
        if not api_key or not api_key.strip():
            return None
        result = await self.db.execute(
            select(Tenant).where(
                Tenant.api_key == api_key.strip(),
                Tenant.is_active.is_(True),
            )
        )
        return result.scalar_one_or_none()
