"""
Base model with common fields.

All tenant-scoped tables inherit from this to get:
- id (UUID primary key)
- tenant_id (for multi-tenancy)
- created_at (when the record was created)
- updated_at (when the record was last modified)
"""

import uuid
from datetime import datetime

from sqlalchemy import Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from booking_engine.db.base import Base
from booking_engine.db.types import UTCDateTime
from booking_engine.utils.time import utc_now


class TenantScopedModel(Base):
    """
    Abstract base class for all tenant-scoped models.

    This is not a real table - it's a template that other models inherit from.
    Every table that belongs to a tenant will have these fields automatically.
    """

    __abstract__ = True  # This means: don't create a table for this class

    # Primary key - UUID (universally unique identifier)
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    # Tenant ID - identifies which organization owns this data
    # Indexed for fast lookups when filtering by tenant
    tenant_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        nullable=False,
        index=True,
    )

    # Timestamps - set in Python so the values are known without a refresh
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        default=utc_now,
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        default=utc_now,
        server_default=func.now(),
        onupdate=utc_now,
        nullable=False,
    )
