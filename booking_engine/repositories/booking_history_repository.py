"""
Repository for the append-only booking history.
"""

import uuid
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from booking_engine.models.booking_history import BookingHistory


class BookingHistoryRepository:
    """Insert and read helpers only."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self,
        tenant_id: UUID,
        booking_id: UUID,
        action: str,
        old_values: Optional[Dict[str, Any]],
        new_values: Optional[Dict[str, Any]],
        performed_by: Optional[UUID] = None,
    ) -> BookingHistory:
        record = BookingHistory(
            id=uuid.uuid4(),
            tenant_id=tenant_id,
            booking_id=booking_id,
            action=action,
            old_values=old_values,
            new_values=new_values,
            performed_by=performed_by,
        )
        self.db.add(record)
        await self.db.flush()
        return record

    async def list_for_booking(self, tenant_id: UUID, booking_id: UUID) -> List[BookingHistory]:
        result = await self.db.execute(
            select(BookingHistory)
            .where(
                BookingHistory.tenant_id == tenant_id,
                BookingHistory.booking_id == booking_id,
            )
            .order_by(BookingHistory.performed_at.asc(), BookingHistory.id.asc())
        )
        return list(result.scalars().all())
