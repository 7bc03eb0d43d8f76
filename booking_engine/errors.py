"""Error taxonomy for the booking engine and structured API error helpers."""

from __future__ import annotations

from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import Request
from fastapi.responses import JSONResponse


def build_error_payload(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    payload = {"error": {"code": code, "message": message}}
    if details is not None:
        payload["error"]["details"] = details
    return payload


class BookingEngineError(Exception):
    """Base class for every error the engine reports to its callers."""

    code = "booking_engine_error"
    default_message = "Booking engine error"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_payload(self) -> Dict[str, Any]:
        return build_error_payload(self.code, self.message, self.details)


# Not found. Messages are fixed so that an out-of-scope id reads exactly like a missing one.


class NotFoundError(BookingEngineError):
    code = "not_found"
    default_message = "Not found"


class TenantNotFound(NotFoundError):
    code = "tenant_not_found"
    default_message = "Tenant not found"


class ResourceNotFound(NotFoundError):
    code = "resource_not_found"
    default_message = "Resource not found or not available"


class BookingNotFound(NotFoundError):
    code = "booking_not_found"
    default_message = "Booking not found"


# Caller input errors


class ValidationError(BookingEngineError):
    code = "validation_error"
    default_message = "Invalid request"


class InvalidInterval(ValidationError):
    code = "invalid_interval"
    default_message = "Start time must be before end time"


class InvalidRange(ValidationError):
    code = "invalid_range"
    default_message = "Start date must not be after end date"


class InvalidDuration(ValidationError):
    code = "invalid_duration"
    default_message = "Slot duration must be a positive number of minutes"


class InvalidTransition(ValidationError):
    code = "invalid_transition"
    default_message = "Booking status transition is not allowed"


class BookingConflict(BookingEngineError):
    """The requested interval overlaps an active booking on the same resource."""

    code = "booking_conflict"
    default_message = "Booking conflict: Resource is already booked for this time period"


# Identity errors (raised by the principal adapter, propagated unchanged)


class Unauthenticated(BookingEngineError):
    code = "unauthenticated"
    default_message = "Authentication required"


class Forbidden(BookingEngineError):
    code = "forbidden"
    default_message = "Access denied"


class InvalidTenant(BookingEngineError):
    code = "invalid_tenant"
    default_message = "Invalid or inactive API key"


class AuditWriteFailed(BookingEngineError):
    """
    The booking change was committed but its audit record could not be written.

    Callers can tell this degraded state apart from a failed booking write.
    """

    code = "audit_write_failed"
    default_message = "Booking saved but audit record could not be written"

    def __init__(self, booking_id: UUID, action: str, message: Optional[str] = None):
        self.booking_id = booking_id
        self.action = action
        super().__init__(
            message,
            {"booking_id": str(booking_id), "action": action, "booking_saved": True, "degraded": True},
        )


class StorageUnavailable(BookingEngineError):
    code = "storage_unavailable"
    default_message = "Storage temporarily unavailable"


# HTTP translation. Order matters: the first matching base class wins.
ERROR_STATUS_CODES: list[tuple[type[BookingEngineError], int]] = [
    (NotFoundError, 404),
    (BookingConflict, 409),
    (ValidationError, 422),
    (Unauthenticated, 401),
    (Forbidden, 403),
    (InvalidTenant, 403),
    (AuditWriteFailed, 500),
    (StorageUnavailable, 503),
]


def status_code_for(exc: BookingEngineError) -> int:
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, error_type):
            return status_code
    return 500


async def booking_engine_error_handler(_: Request, exc: BookingEngineError) -> JSONResponse:
    status_code = status_code_for(exc)
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(status_code=status_code, content=exc.to_payload(), headers=headers)
