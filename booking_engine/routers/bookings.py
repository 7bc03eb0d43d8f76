"""
Booking router - API endpoints for bookings.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from booking_engine.core.config import settings
from booking_engine.core.dependencies import get_db, get_tenant_context
from booking_engine.core.tenant_context import TenantContext
from booking_engine.schemas.audit import AuditRecordRead
from booking_engine.schemas.booking import BookingCreate, BookingFilter, BookingRead, BookingUpdate
from booking_engine.scheduling.transitions import BookingStatus
from booking_engine.services.booking_service import BookingService

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.get("", response_model=List[BookingRead])
async def list_bookings(
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    resource_id: Optional[UUID] = None,
    user_id: Optional[UUID] = None,
    status: Optional[BookingStatus] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
):
    """
    List bookings with pagination and filters.

    Filters: resource_id, user_id, status, start_date, end_date.
    """
    filters = BookingFilter(
        resource_id=resource_id,
        user_id=user_id,
        status=status,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
        offset=offset,
    )
    return await BookingService(db).list_bookings(tenant, filters)


@router.post("", response_model=BookingRead, status_code=status.HTTP_201_CREATED)
async def create_booking(
    data: BookingCreate,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """Create a booking. Returns 409 when the resource is already booked."""
    return await BookingService(db).create_booking(tenant, data)


@router.get("/{booking_id}", response_model=BookingRead)
async def get_booking(
    booking_id: UUID,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """Get a booking by ID."""
    return await BookingService(db).get_booking(tenant, booking_id)


@router.put("/{booking_id}", response_model=BookingRead)
@router.patch("/{booking_id}", response_model=BookingRead)
async def update_booking(
    booking_id: UUID,
    data: BookingUpdate,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """Update a booking. Only the fields sent are changed."""
    return await BookingService(db).update_booking(tenant, booking_id, data)


@router.delete("/{booking_id}", response_model=BookingRead)
async def cancel_booking(
    booking_id: UUID,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """Cancel a booking. The record is kept with status 'cancelled'."""
    return await BookingService(db).cancel_booking(tenant, booking_id)


@router.post("/{booking_id}/confirm", response_model=BookingRead)
async def confirm_booking(
    booking_id: UUID,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """Confirm a pending booking."""
    return await BookingService(db).confirm_booking(tenant, booking_id)


@router.get("/{booking_id}/history", response_model=List[AuditRecordRead])
async def get_booking_history(
    booking_id: UUID,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """Audit trail of a booking, oldest first."""
    return await BookingService(db).list_history(tenant, booking_id)
