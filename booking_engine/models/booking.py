"""
Booking model.

A reservation of one resource for a half-open interval [start_time, end_time).
Bookings are never deleted; cancellation is a status change.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DDL, CheckConstraint, ForeignKey, Index, String, Text, Uuid, event
from sqlalchemy.orm import Mapped, mapped_column

from booking_engine.db.types import JSONType, UTCDateTime
from booking_engine.models.base_model import TenantScopedModel
from booking_engine.scheduling.transitions import BookingStatus

NO_OVERLAP_CONSTRAINT = "bookings_no_overlap_per_resource"


class Booking(TenantScopedModel):
    """Booking table - owned jointly by a tenant and one of its resources."""

    __tablename__ = "bookings"

    resource_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("resources.id"),
        nullable=False,
    )

    # Owning user as presented by the caller's principal (opaque to the engine)
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        nullable=True,
        index=True,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    start_time: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    end_time: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=BookingStatus.PENDING.value,
    )

    external_reference: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Note: Using 'booking_metadata' instead of 'metadata' (reserved by SQLAlchemy)
    booking_metadata: Mapped[Optional[dict]] = mapped_column(
        "metadata",  # Column name in database is still 'metadata'
        JSONType,
        nullable=True,
    )

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_bookings_interval_order"),
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'cancelled', 'completed')",
            name="ck_bookings_status",
        ),
        Index("ix_bookings_tenant_resource_window", "tenant_id", "resource_id", "start_time", "end_time"),
        Index("ix_bookings_tenant_status", "tenant_id", "status"),
    )


# Storage-level guarantee against double booking: no two active bookings of the
# same tenant+resource may overlap. Mirrors the alembic migration for create_all.
event.listen(
    Booking.__table__,
    "after_create",
    DDL(
        "ALTER TABLE bookings ADD CONSTRAINT "
        f"{NO_OVERLAP_CONSTRAINT} EXCLUDE USING gist ("
        "tenant_id WITH =, resource_id WITH =, "
        "tstzrange(start_time, end_time, '[)') WITH &&"
        ") WHERE (status IN ('pending', 'confirmed'))"
    ).execute_if(dialect="postgresql"),
)
