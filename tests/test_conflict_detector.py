"""Conflict detector queries."""

import uuid
from datetime import datetime, timezone

import pytest

from booking_engine.errors import ResourceNotFound
from booking_engine.schemas.booking import BookingCreate
from booking_engine.scheduling.interval import Interval
from booking_engine.services.booking_service import BookingService
from booking_engine.services.conflict_detector import ConflictDetector


def at(hour: int, minute: int = 0) -> datetime:
    return datetime(2024, 8, 15, hour, minute, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_has_conflict(db, seeded):
    booking = await BookingService(db).create_booking(
        seeded.ctx_a,
        BookingCreate(resource_id=seeded.room.id, title="Held", start_time=at(14), end_time=at(15)),
    )
    detector = ConflictDetector(db)
    tenant_id = seeded.tenant_a.id

    assert await detector.has_conflict(tenant_id, seeded.room.id, Interval(at(14, 30), at(15, 30)))
    assert await detector.has_conflict(tenant_id, seeded.room.id, Interval(at(13), at(16)))
    assert not await detector.has_conflict(tenant_id, seeded.room.id, Interval(at(15), at(16)))
    assert not await detector.has_conflict(tenant_id, seeded.room.id, Interval(at(13), at(14)))
    assert not await detector.has_conflict(
        tenant_id, seeded.room.id, Interval(at(14), at(15)), exclude_booking_id=booking.id
    )
    assert not await detector.has_conflict(tenant_id, seeded.van.id, Interval(at(14), at(15)))


@pytest.mark.asyncio
async def test_has_conflict_is_tenant_scoped(db, seeded):
    await BookingService(db).create_booking(
        seeded.ctx_a,
        BookingCreate(resource_id=seeded.room.id, title="Held", start_time=at(14), end_time=at(15)),
    )
    detector = ConflictDetector(db)

    with pytest.raises(ResourceNotFound):
        await detector.has_conflict(seeded.tenant_b.id, seeded.room.id, Interval(at(14), at(15)))
    with pytest.raises(ResourceNotFound):
        await detector.has_conflict(seeded.tenant_a.id, uuid.uuid4(), Interval(at(14), at(15)))
