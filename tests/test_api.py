"""HTTP surface: status codes, error payloads and tenant resolution."""

import uuid
from datetime import datetime, timedelta, timezone

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from booking_engine.core.config import settings
from booking_engine.db.session import get_db
from booking_engine.main import app

from conftest import INACTIVE_TENANT_KEY, TENANT_A_KEY, TENANT_B_KEY

A = {"X-API-Key": TENANT_A_KEY}
B = {"X-API-Key": TENANT_B_KEY}


def make_token(tenant_id, user_id=None, role="user", **overrides) -> str:
    payload = {
        "user_id": str(user_id or uuid.uuid4()),
        "tenant_id": str(tenant_id),
        "role": role,
        "iss": settings.JWT_ISSUER,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=15),
    }
    payload.update(overrides)
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def bearer(token: str, headers=A) -> dict:
    return {**headers, "Authorization": f"Bearer {token}"}


def booking_body(resource, start="2024-08-15T14:00:00Z", end="2024-08-15T15:00:00Z", **extra) -> dict:
    return {"resource_id": str(resource.id), "title": "Inspection", "start_time": start, "end_time": end, **extra}


@pytest_asyncio.fixture
async def client(session_maker, seeded):
    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_missing_api_key_is_unauthenticated(client):
    response = await client.get("/bookings")

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"
    assert response.json()["error"]["code"] == "unauthenticated"


@pytest.mark.asyncio
@pytest.mark.parametrize("key", ["not-a-key", INACTIVE_TENANT_KEY])
async def test_unknown_or_inactive_key_is_rejected(client, key):
    response = await client.get("/bookings", headers={"X-API-Key": key})

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "invalid_tenant"


@pytest.mark.asyncio
async def test_booking_lifecycle_over_http(client, seeded):
    created = await client.post("/bookings", json=booking_body(seeded.room, metadata={"crew": 2}), headers=A)
    assert created.status_code == 201
    booking = created.json()
    assert booking["status"] == "pending"
    assert booking["metadata"] == {"crew": 2}
    booking_id = booking["id"]

    conflict = await client.post(
        "/bookings",
        json=booking_body(seeded.room, "2024-08-15T14:30:00Z", "2024-08-15T15:30:00Z"),
        headers=A,
    )
    assert conflict.status_code == 409
    assert conflict.json()["error"]["code"] == "booking_conflict"

    touching = await client.post(
        "/bookings",
        json=booking_body(seeded.room, "2024-08-15T15:00:00Z", "2024-08-15T16:00:00Z"),
        headers=A,
    )
    assert touching.status_code == 201

    patched = await client.patch(f"/bookings/{booking_id}", json={"title": "Final inspection"}, headers=A)
    assert patched.status_code == 200
    assert patched.json()["title"] == "Final inspection"
    assert patched.json()["start_time"].startswith("2024-08-15T14:00:00")

    confirmed = await client.post(f"/bookings/{booking_id}/confirm", headers=A)
    assert confirmed.status_code == 200
    assert confirmed.json()["status"] == "confirmed"

    cancelled = await client.delete(f"/bookings/{booking_id}", headers=A)
    assert cancelled.status_code == 200
    assert cancelled.json()["status"] == "cancelled"

    again = await client.delete(f"/bookings/{booking_id}", headers=A)
    assert again.status_code == 200
    assert again.json()["status"] == "cancelled"

    history = await client.get(f"/bookings/{booking_id}/history", headers=A)
    assert [record["action"] for record in history.json()] == ["created", "updated", "confirmed", "cancelled"]

    listed = await client.get("/bookings", params={"status": "cancelled"}, headers=A)
    assert [item["id"] for item in listed.json()] == [booking_id]


@pytest.mark.asyncio
async def test_validation_errors_are_422(client, seeded):
    inverted = await client.post(
        "/bookings",
        json=booking_body(seeded.room, "2024-08-15T15:00:00Z", "2024-08-15T14:00:00Z"),
        headers=A,
    )
    assert inverted.status_code == 422
    assert inverted.json()["error"]["code"] == "invalid_interval"

    created = await client.post("/bookings", json=booking_body(seeded.room), headers=A)
    bad_transition = await client.put(
        f"/bookings/{created.json()['id']}",
        json={"status": "completed"},
        headers=A,
    )
    assert bad_transition.status_code == 422
    assert bad_transition.json()["error"]["details"] == {"from": "pending", "to": "completed"}


@pytest.mark.asyncio
async def test_other_tenant_gets_not_found(client, seeded):
    created = await client.post("/bookings", json=booking_body(seeded.room), headers=A)
    booking_id = created.json()["id"]

    for response in (
        await client.get(f"/bookings/{booking_id}", headers=B),
        await client.patch(f"/bookings/{booking_id}", json={"title": "x"}, headers=B),
        await client.delete(f"/bookings/{booking_id}", headers=B),
    ):
        assert response.status_code == 404
        assert response.json()["error"]["message"] == "Booking not found"

    foreign_resource = await client.post("/bookings", json=booking_body(seeded.room), headers=B)
    assert foreign_resource.status_code == 404
    assert foreign_resource.json()["error"]["code"] == "resource_not_found"


@pytest.mark.asyncio
async def test_resources_and_availability(client, seeded):
    resources = await client.get("/resources", headers=A)
    assert [item["name"] for item in resources.json()] == ["Room 1", "Van"]

    availability = await client.get(
        f"/resources/{seeded.room.id}/availability",
        params={"start_date": "2099-01-05", "end_date": "2099-01-06"},
        headers=A,
    )
    assert availability.status_code == 200
    body = availability.json()
    assert len(body["slots"]) == 9
    assert body["slots"][0]["start_time"].startswith("2099-01-05T09:00:00")
    assert body["existing"] == []

    inverted = await client.get(
        f"/resources/{seeded.room.id}/availability",
        params={"start_date": "2099-01-06", "end_date": "2099-01-05"},
        headers=A,
    )
    assert inverted.status_code == 422
    assert inverted.json()["error"]["code"] == "invalid_range"

    zero_duration = await client.get(
        f"/resources/{seeded.room.id}/availability",
        params={"start_date": "2099-01-05", "end_date": "2099-01-06", "duration": 0},
        headers=A,
    )
    assert zero_duration.status_code == 422
    assert zero_duration.json()["error"]["code"] == "invalid_duration"

    retired = await client.get(
        f"/resources/{seeded.retired.id}/availability",
        params={"start_date": "2099-01-05", "end_date": "2099-01-06"},
        headers=A,
    )
    assert retired.status_code == 404


@pytest.mark.asyncio
async def test_bearer_token_scopes_user(client, seeded):
    alice = uuid.uuid4()
    alice_headers = bearer(make_token(seeded.tenant_a.id, user_id=alice))

    own = await client.post("/bookings", json=booking_body(seeded.room), headers=alice_headers)
    assert own.status_code == 201
    assert own.json()["user_id"] == str(alice)

    other = await client.post(
        "/bookings",
        json=booking_body(seeded.room, "2024-08-15T16:00:00Z", "2024-08-15T17:00:00Z"),
        headers=A,
    )

    listed = await client.get("/bookings", headers=alice_headers)
    assert [item["id"] for item in listed.json()] == [own.json()["id"]]

    forbidden = await client.get(f"/bookings/{other.json()['id']}", headers=alice_headers)
    assert forbidden.status_code == 403

    guest = bearer(make_token(seeded.tenant_a.id, role="guest"))
    guest_write = await client.post(
        "/bookings",
        json=booking_body(seeded.room, "2024-08-15T18:00:00Z", "2024-08-15T19:00:00Z"),
        headers=guest,
    )
    assert guest_write.status_code == 403


@pytest.mark.asyncio
async def test_bad_tokens(client, seeded):
    wrong_tenant = await client.get("/bookings", headers=bearer(make_token(seeded.tenant_b.id)))
    assert wrong_tenant.status_code == 403
    assert wrong_tenant.json()["error"]["code"] == "forbidden"

    garbage = await client.get("/bookings", headers=bearer("not.a.jwt"))
    assert garbage.status_code == 401

    expired = make_token(seeded.tenant_a.id, exp=datetime.now(timezone.utc) - timedelta(minutes=1))
    assert (await client.get("/bookings", headers=bearer(expired))).status_code == 401

    unknown_role = make_token(seeded.tenant_a.id, role="superuser")
    assert (await client.get("/bookings", headers=bearer(unknown_role))).status_code == 401


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["api_ok"] is True
    assert body["db_ok"] is True
    assert body["alembic_current"] is None
    assert isinstance(body["pool"], str)
    assert body["alembic_head"] == "001_booking_engine_schema"


@pytest.mark.asyncio
async def test_calendar(client, seeded):
    alice = uuid.uuid4()
    alice_headers = bearer(make_token(seeded.tenant_a.id, user_id=alice))
    own = await client.post("/bookings", json=booking_body(seeded.room), headers=alice_headers)
    await client.post(
        "/bookings",
        json=booking_body(seeded.room, "2024-08-15T16:00:00Z", "2024-08-15T17:00:00Z"),
        headers=A,
    )

    response = await client.get("/calendar", params={"month": "2024-08"}, headers=A)
    assert response.status_code == 200
    body = response.json()
    assert body["period"]["month"] == "2024-08"
    assert len(body["days"]) == 31
    assert body["days"][14]["day"] == "2024-08-15"
    assert len(body["days"][14]["bookings"]) == 2
    assert body["summary"] == {"total_bookings": 2, "confirmed_bookings": 0, "pending_bookings": 2}

    scoped = await client.get("/calendar", params={"month": "2024-08"}, headers=alice_headers)
    assert [item["id"] for item in scoped.json()["bookings"]] == [own.json()["id"]]

    invalid = await client.get("/calendar", params={"month": "2024-13"}, headers=A)
    assert invalid.status_code == 422
    assert invalid.json()["error"]["code"] == "invalid_range"
