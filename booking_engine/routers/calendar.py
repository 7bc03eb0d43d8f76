"""
Calendar router - month view of bookings.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from booking_engine.core.dependencies import get_db, get_tenant_context
from booking_engine.core.tenant_context import TenantContext
from booking_engine.schemas.calendar import CalendarRead
from booking_engine.services.calendar_service import CalendarService

router = APIRouter(prefix="/calendar", tags=["calendar"])


@router.get("", response_model=CalendarRead)
async def get_calendar(
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
    month: Optional[str] = Query(None, description="YYYY-MM, defaults to the current month"),
    resource_id: Optional[UUID] = None,
):
    """Month calendar of non-cancelled bookings in the tenant timezone."""
    return await CalendarService(db).get_calendar(tenant, month=month, resource_id=resource_id)
