"""
Resource model.

A bookable unit (room, technician, equipment) owned by exactly one tenant.
"""

from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from booking_engine.db.types import JSONType
from booking_engine.models.base_model import TenantScopedModel


class Resource(TenantScopedModel):
    """
    Resource table.

    Created and deactivated by administrative tooling; the engine only reads it.
    Capacity is informational, every resource is booked as capacity 1.
    """

    __tablename__ = "resources"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    settings: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint("capacity > 0", name="ck_resources_capacity_positive"),
        Index("ix_resources_tenant_active", "tenant_id", "is_active"),
    )
