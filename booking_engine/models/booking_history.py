"""
BookingHistory model.

Append-only audit ledger of booking state changes. Rows are written once and
never updated or deleted.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Index, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from booking_engine.db.base import Base
from booking_engine.db.types import JSONType, UTCDateTime
from booking_engine.utils.time import utc_now


class BookingHistory(Base):
    """
    One audit record per lifecycle operation.

    booking_id is a lookup reference only (no foreign key), so the history
    outlives any later change to the booking row.
    """

    __tablename__ = "booking_history"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    tenant_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False)
    booking_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False)

    # created | updated | cancelled | confirmed
    action: Mapped[str] = mapped_column(String(20), nullable=False)

    old_values: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)
    new_values: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)

    performed_by: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid(as_uuid=True), nullable=True)

    performed_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        default=utc_now,
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_booking_history_tenant_booking", "tenant_id", "booking_id", "performed_at"),
    )
