import uuid

import pytest

from booking_engine.errors import (
    AuditWriteFailed,
    BookingConflict,
    BookingNotFound,
    Forbidden,
    InvalidDuration,
    InvalidTenant,
    ResourceNotFound,
    StorageUnavailable,
    TenantNotFound,
    Unauthenticated,
    build_error_payload,
    status_code_for,
)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "error,status_code",
    [
        (BookingNotFound(), 404),
        (TenantNotFound(), 404),
        (ResourceNotFound(), 404),
        (InvalidDuration(), 422),
        (BookingConflict(), 409),
        (Unauthenticated(), 401),
        (Forbidden(), 403),
        (InvalidTenant(), 403),
        (AuditWriteFailed(uuid.uuid4(), "created"), 500),
        (StorageUnavailable(), 503),
    ],
)
def test_status_codes(error, status_code):
    assert status_code_for(error) == status_code


def test_payload_shape():
    assert build_error_payload("booking_conflict", "taken") == {
        "error": {"code": "booking_conflict", "message": "taken"}
    }

    booking_id = uuid.uuid4()
    payload = AuditWriteFailed(booking_id, "cancelled").to_payload()
    assert payload["error"]["code"] == "audit_write_failed"
    assert payload["error"]["details"]["booking_id"] == str(booking_id)
    assert payload["error"]["details"]["degraded"] is True
