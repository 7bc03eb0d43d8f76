"""
Booking lifecycle: create, update, confirm and cancel bookings.

Every write runs as one unit of work on the caller's session: the resource row
is locked, the conflict check and the write happen in the same transaction, and
the audit record is appended before commit. The database's exclusion constraint
backs the conflict check.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession

from booking_engine.core.permissions import raise_if_cannot_write
from booking_engine.core.tenant_context import TenantContext
from booking_engine.errors import (
    BookingConflict,
    BookingEngineError,
    BookingNotFound,
    Forbidden,
    InvalidTransition,
    StorageUnavailable,
)
from booking_engine.models.booking import NO_OVERLAP_CONSTRAINT, Booking
from booking_engine.models.booking_history import BookingHistory
from booking_engine.repositories.booking_repository import BookingRepository
from booking_engine.schemas.booking import BookingCreate, BookingFilter, BookingRead, BookingUpdate
from booking_engine.scheduling.interval import Interval
from booking_engine.scheduling.transitions import BookingStatus, ensure_transition, is_active, is_terminal
from booking_engine.services.audit_ledger import AuditActions, AuditLedger
from booking_engine.services.conflict_detector import ConflictDetector

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE for exclusion_violation
EXCLUSION_VIOLATION = "23P01"


def is_overlap_violation(exc: IntegrityError) -> bool:
    """True if the IntegrityError comes from the no-overlap exclusion constraint."""
    orig = getattr(exc, "orig", None)
    for candidate in (orig, getattr(orig, "__cause__", None)):
        if candidate is None:
            continue
        if getattr(candidate, "sqlstate", None) == EXCLUSION_VIOLATION:
            return True
        if getattr(candidate, "constraint_name", None) == NO_OVERLAP_CONSTRAINT:
            return True
    return NO_OVERLAP_CONSTRAINT in str(orig)


def snapshot(booking: Booking) -> Dict[str, Any]:
    """JSON-safe full copy of a booking for the audit ledger."""
    return BookingRead.model_validate(booking).model_dump(mode="json")


class BookingService:
    """Service for the booking lifecycle."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.bookings = BookingRepository(db)
        self.detector = ConflictDetector(db)
        self.ledger = AuditLedger(db)

    @asynccontextmanager
    async def _unit_of_work(self, operation: str):
        """
        Roll back on any failure and translate storage errors.

        Overlap violations raised by the database become BookingConflict;
        connection and timeout failures become StorageUnavailable.
        """
        try:
            yield
        except BookingEngineError:
            await self.db.rollback()
            raise
        except IntegrityError as exc:
            await self.db.rollback()
            if is_overlap_violation(exc):
                logger.info("Overlap rejected by database during %s", operation)
                raise BookingConflict() from exc
            raise
        except (OperationalError, InterfaceError, PoolTimeoutError) as exc:
            await self.db.rollback()
            logger.warning("Storage failure during %s: %s", operation, exc.__class__.__name__)
            raise StorageUnavailable() from exc
        except Exception:
            await self.db.rollback()
            raise

    async def _commit_audited(
        self,
        tenant: TenantContext,
        booking: Booking,
        action: str,
        old_value: Optional[Dict[str, Any]],
        new_value: Dict[str, Any],
        actor: Optional[UUID],
    ) -> None:
        """
        Append the audit record and commit.

        If only the audit write fails, the booking change is still committed and
        AuditWriteFailed propagates to the caller.
        """
        try:
            await self.ledger.append(tenant.tenant_id, booking.id, action, old_value, new_value, actor)
        except BookingEngineError:
            await self.db.commit()
            raise
        await self.db.commit()

    def _check_owner(self, tenant: TenantContext, booking: Booking) -> None:
        if not tenant.sees_all_bookings and booking.user_id != tenant.user_id:
            raise Forbidden()

    async def _load(self, tenant: TenantContext, booking_id: UUID, for_update: bool = False) -> Booking:
        booking = await self.bookings.get_by_id(tenant.tenant_id, booking_id, for_update=for_update)
        if booking is None:
            raise BookingNotFound()
        self._check_owner(tenant, booking)
        return booking

    async def get_booking(self, tenant: TenantContext, booking_id: UUID) -> Booking:
        """Get a booking by ID within the tenant."""
        return await self._load(tenant, booking_id)

    async def list_bookings(self, tenant: TenantContext, filters: BookingFilter) -> List[Booking]:
        """List bookings ordered by start time; non-admin users only see their own."""
        if not tenant.sees_all_bookings:
            filters = filters.model_copy(update={"user_id": tenant.user_id})
        return await self.bookings.list(tenant.tenant_id, filters)

    async def create_booking(
        self,
        tenant: TenantContext,
        request: BookingCreate,
        actor: Optional[UUID] = None,
    ) -> Booking:
        """
        Create a pending booking.

        Raises:
            ResourceNotFound: resource missing, inactive or out of scope
            InvalidInterval: start_time is not before end_time
            BookingConflict: an active booking overlaps the interval
            AuditWriteFailed: booking saved, audit record missing
        """
        raise_if_cannot_write(tenant.role, "create bookings")
        actor = actor or tenant.user_id

        owner_id = request.user_id or tenant.user_id
        if not tenant.sees_all_bookings and owner_id != tenant.user_id:
            raise Forbidden("Users can only book for themselves")
        if owner_id != request.user_id:
            request = request.model_copy(update={"user_id": owner_id})

        async with self._unit_of_work("create_booking"):
            await self.detector.require_resource(tenant.tenant_id, request.resource_id, lock=True)
            interval = Interval(request.start_time, request.end_time)

            if await self.detector.overlaps_active_booking(tenant.tenant_id, request.resource_id, interval):
                logger.info(
                    "Booking conflict on resource %s (tenant %s) for %s - %s",
                    request.resource_id,
                    tenant.tenant_id,
                    interval.start.isoformat(),
                    interval.end.isoformat(),
                )
                raise BookingConflict()

            booking = await self.bookings.create(tenant.tenant_id, request, interval)
            await self._commit_audited(
                tenant,
                booking,
                AuditActions.CREATED,
                None,
                request.model_dump(mode="json"),
                actor,
            )

        logger.info("Booking %s created (tenant %s)", booking.id, tenant.tenant_id)
        return booking

    async def update_booking(
        self,
        tenant: TenantContext,
        booking_id: UUID,
        patch: BookingUpdate,
        actor: Optional[UUID] = None,
    ) -> Booking:
        """
        Apply a partial update.

        A changed interval is re-checked for conflicts excluding the booking
        itself. Status changes must follow the forward transition table.

        Raises:
            BookingNotFound: booking missing or out of scope
            InvalidInterval: merged start_time is not before end_time
            InvalidTransition: illegal status change, or moving a terminal booking
            BookingConflict: the new interval overlaps another active booking
            AuditWriteFailed: update saved, audit record missing
        """
        raise_if_cannot_write(tenant.role, "update bookings")
        actor = actor or tenant.user_id

        async with self._unit_of_work("update_booking"):
            booking = await self._load(tenant, booking_id)
            if patch.changes_interval:
                # Lock order is always resource, then booking
                await self.detector.lock_resource(tenant.tenant_id, booking.resource_id)
            booking = await self._load(tenant, booking_id, for_update=True)

            changes = patch.model_dump(exclude_unset=True)
            if "metadata" in changes:
                changes["booking_metadata"] = changes.pop("metadata")

            target_status = booking.status
            if "status" in changes:
                ensure_transition(booking.status, changes["status"])
                target_status = BookingStatus(changes["status"]).value
                changes["status"] = target_status

            if patch.changes_interval:
                interval = Interval(
                    changes.get("start_time", booking.start_time),
                    changes.get("end_time", booking.end_time),
                )
                moved = (interval.start, interval.end) != (booking.start_time, booking.end_time)
                if moved and is_terminal(booking.status):
                    raise InvalidTransition(f"Cannot reschedule a {booking.status} booking")
                if moved and is_active(target_status):
                    if await self.detector.overlaps_active_booking(
                        tenant.tenant_id,
                        booking.resource_id,
                        interval,
                        exclude_booking_id=booking.id,
                    ):
                        logger.info("Booking conflict rescheduling %s (tenant %s)", booking.id, tenant.tenant_id)
                        raise BookingConflict()
                changes["start_time"] = interval.start
                changes["end_time"] = interval.end

            old_value = snapshot(booking)
            await self.bookings.apply_changes(booking, changes)
            await self._commit_audited(
                tenant,
                booking,
                AuditActions.UPDATED,
                old_value,
                patch.model_dump(mode="json", exclude_unset=True),
                actor,
            )

        logger.info("Booking %s updated (tenant %s)", booking.id, tenant.tenant_id)
        return booking

    async def confirm_booking(
        self,
        tenant: TenantContext,
        booking_id: UUID,
        actor: Optional[UUID] = None,
    ) -> Booking:
        """
        Move a pending booking to confirmed.

        Confirming a confirmed booking is a no-op; terminal bookings raise
        InvalidTransition.
        """
        raise_if_cannot_write(tenant.role, "confirm bookings")
        actor = actor or tenant.user_id

        async with self._unit_of_work("confirm_booking"):
            booking = await self._load(tenant, booking_id, for_update=True)
            if booking.status == BookingStatus.CONFIRMED.value:
                await self.db.commit()
                return booking
            ensure_transition(booking.status, BookingStatus.CONFIRMED)

            old_value = snapshot(booking)
            await self.bookings.apply_changes(booking, {"status": BookingStatus.CONFIRMED.value})
            await self._commit_audited(
                tenant,
                booking,
                AuditActions.CONFIRMED,
                old_value,
                {"status": BookingStatus.CONFIRMED.value},
                actor,
            )

        logger.info("Booking %s confirmed (tenant %s)", booking.id, tenant.tenant_id)
        return booking

    async def cancel_booking(
        self,
        tenant: TenantContext,
        booking_id: UUID,
        actor: Optional[UUID] = None,
    ) -> Booking:
        """
        Cancel a booking.

        Cancelling a booking that is already cancelled or completed succeeds
        without changing it and without writing an audit record.
        """
        raise_if_cannot_write(tenant.role, "cancel bookings")
        actor = actor or tenant.user_id

        async with self._unit_of_work("cancel_booking"):
            booking = await self._load(tenant, booking_id, for_update=True)
            if is_terminal(booking.status):
                await self.db.commit()
                logger.info("Cancel of %s booking %s is a no-op", booking.status, booking.id)
                return booking

            old_value = snapshot(booking)
            await self.bookings.apply_changes(booking, {"status": BookingStatus.CANCELLED.value})
            await self._commit_audited(
                tenant,
                booking,
                AuditActions.CANCELLED,
                old_value,
                {"status": BookingStatus.CANCELLED.value},
                actor,
            )

        logger.info("Booking %s cancelled (tenant %s)", booking.id, tenant.tenant_id)
        return booking

    async def list_history(self, tenant: TenantContext, booking_id: UUID) -> List[BookingHistory]:
        """Audit records of a visible booking, oldest first."""
        await self._load(tenant, booking_id)
        return await self.ledger.list_for_booking(tenant.tenant_id, booking_id)
