"""
Resource router - resource listing and availability.
"""

from datetime import date
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from booking_engine.core.config import settings
from booking_engine.core.dependencies import get_db, get_tenant_context
from booking_engine.core.tenant_context import TenantContext
from booking_engine.schemas.availability import AvailabilityRead
from booking_engine.schemas.resource import ResourceRead
from booking_engine.services.availability_service import AvailabilityPlanner
from booking_engine.services.resource_service import ResourceService

router = APIRouter(prefix="/resources", tags=["resources"])


@router.get("", response_model=List[ResourceRead])
async def list_resources(
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """List active resources."""
    return await ResourceService(db).list_resources(tenant.tenant_id)


@router.get("/{resource_id}", response_model=ResourceRead)
async def get_resource(
    resource_id: UUID,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """Get an active resource by ID."""
    return await ResourceService(db).get_resource(tenant.tenant_id, resource_id)


@router.get("/{resource_id}/availability", response_model=AvailabilityRead)
async def get_availability(
    resource_id: UUID,
    start_date: date,
    end_date: date,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
    duration: int = Query(settings.DEFAULT_SLOT_DURATION_MINUTES),
    include_unavailable: bool = False,
):
    """
    Bookable slots for the local days [start_date, end_date) in the tenant timezone.

    Invalid ranges and non-positive durations return 422.
    """
    return await AvailabilityPlanner(db).plan_availability(
        tenant,
        resource_id,
        start_date,
        end_date,
        duration_minutes=duration,
        include_unavailable=include_unavailable,
    )
