"""
Audit ledger for booking state changes.
"""

import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from booking_engine.errors import AuditWriteFailed
from booking_engine.models.booking_history import BookingHistory
from booking_engine.repositories.booking_history_repository import BookingHistoryRepository

logger = logging.getLogger(__name__)


class AuditActions:
    CREATED = "created"
    UPDATED = "updated"
    CANCELLED = "cancelled"
    CONFIRMED = "confirmed"

    ALL = [CREATED, UPDATED, CANCELLED, CONFIRMED]


class AuditLedger:
    """Append-only writer and reader for booking history."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = BookingHistoryRepository(db)

    async def append(
        self,
        tenant_id: UUID,
        booking_id: UUID,
        action: str,
        old_value: Optional[Dict[str, Any]],
        new_value: Optional[Dict[str, Any]],
        actor: Optional[UUID] = None,
    ) -> BookingHistory:
        """
        Write one audit record inside a SAVEPOINT of the caller's transaction.

        A failed write rolls back only the savepoint, so the caller can still
        commit the booking change it was auditing.

        Raises:
            AuditWriteFailed: the record could not be written
        """
        if action not in AuditActions.ALL:
            raise ValueError(f"unknown audit action {action!r}")
        try:
            async with self.db.begin_nested():
                return await self.repo.create(
                    tenant_id=tenant_id,
                    booking_id=booking_id,
                    action=action,
                    old_values=old_value,
                    new_values=new_value,
                    performed_by=actor,
                )
        except SQLAlchemyError as exc:
            logger.error(
                "Audit write failed for booking %s (tenant %s, action %s): %s",
                booking_id,
                tenant_id,
                action,
                exc.__class__.__name__,
            )
            raise AuditWriteFailed(booking_id, action) from exc

    async def list_for_booking(self, tenant_id: UUID, booking_id: UUID) -> List[BookingHistory]:
        return await self.repo.list_for_booking(tenant_id, booking_id)
