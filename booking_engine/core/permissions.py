"""
Role-based permission helpers.

Roles come from the caller's bearer token. Calls made with only a tenant API key
act as the tenant's own service integration.
"""

from booking_engine.errors import Forbidden


class Roles:
    """Standard roles."""
    ADMIN = "admin"
    USER = "user"
    GUEST = "guest"
    SERVICE = "service"

    # All roles list for validation
    ALL = [ADMIN, USER, GUEST, SERVICE]

    # admin / service: every booking of the tenant
    # user: own bookings only
    # guest: read-only, own bookings only


def check_can_view_all_bookings(user_role: str) -> bool:
    """Check if the caller sees every booking of the tenant."""
    return user_role in [Roles.ADMIN, Roles.SERVICE]


def check_can_write_bookings(user_role: str) -> bool:
    """Check if the caller can create/update/cancel bookings."""
    return user_role in [Roles.ADMIN, Roles.USER, Roles.SERVICE]


def raise_if_cannot_write(user_role: str, action: str = "modify bookings") -> None:
    if not check_can_write_bookings(user_role):
        raise Forbidden(f"Guests cannot {action}.")
