"""
Tenant model.

A Tenant represents an organization using the booking engine.
Each tenant's data is isolated from other tenants.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from booking_engine.db.base import Base
from booking_engine.db.types import JSONType, UTCDateTime
from booking_engine.utils.time import utc_now


class Tenant(Base):
    """
    Tenant table - represents an organization.

    Note: Tenant doesn't inherit from TenantScopedModel because
    the Tenant table itself doesn't belong to a tenant.
    Rows are provisioned outside the engine and only read here.
    """

    __tablename__ = "tenants"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    domain: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )

    # Key presented in the X-API-Key header to identify the tenant
    api_key: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
    )

    # Configuration blob (business hours, advance booking rules, service areas)
    settings: Mapped[Optional[dict]] = mapped_column(
        JSONType,
        nullable=True,
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
    )

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
