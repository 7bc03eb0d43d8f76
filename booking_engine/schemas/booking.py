"""
Booking Pydantic schemas.
"""

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from booking_engine.core.config import settings
from booking_engine.schemas.base import TenantScopedRead
from booking_engine.scheduling.transitions import BookingStatus


class BookingCreate(BaseModel):
    """Schema for creating a new booking. Naive datetimes are read as UTC."""

    resource_id: UUID
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    user_id: Optional[UUID] = None
    external_reference: Optional[str] = Field(default=None, max_length=255)
    metadata: Optional[Dict[str, Any]] = None


class BookingUpdate(BaseModel):
    """
    Schema for a partial booking update.

    Only the fields present in the request are applied.
    """

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    status: Optional[BookingStatus] = None
    external_reference: Optional[str] = Field(default=None, max_length=255)
    metadata: Optional[Dict[str, Any]] = None

    @model_validator(mode="after")
    def reject_null_required_fields(self):
        for field in ("title", "start_time", "end_time", "status"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self

    @property
    def changes_interval(self) -> bool:
        return bool({"start_time", "end_time"} & self.model_fields_set)


class BookingFilter(BaseModel):
    """Listing filters. Results are ordered by start time ascending."""

    resource_id: Optional[UUID] = None
    user_id: Optional[UUID] = None
    status: Optional[BookingStatus] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    limit: int = Field(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE)
    offset: int = Field(default=0, ge=0)


class BookingRead(TenantScopedRead):
    """Schema for reading booking data (API response)."""

    resource_id: UUID
    user_id: Optional[UUID] = None
    title: str
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    status: BookingStatus
    external_reference: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = Field(
        default=None,
        validation_alias=AliasChoices("booking_metadata", "metadata"),
    )

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
