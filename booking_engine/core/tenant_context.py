"""
Tenant context: the isolation scope every engine operation runs in.
"""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from booking_engine.core.permissions import Roles, check_can_view_all_bookings
from booking_engine.core.security import decode_access_token
from booking_engine.errors import Forbidden, InvalidTenant, Unauthenticated
from booking_engine.models.tenant import Tenant
from booking_engine.repositories.tenant_repository import TenantRepository
from booking_engine.schemas.tenant import TenantSettings


@dataclass(frozen=True)
class TenantContext:
    """Resolved caller: tenant boundary, optional user, role and tenant settings."""

    tenant_id: UUID
    settings: TenantSettings
    user_id: Optional[UUID] = None
    role: str = Roles.SERVICE

    @classmethod
    def for_tenant(
        cls,
        tenant: Tenant,
        user_id: Optional[UUID] = None,
        role: str = Roles.SERVICE,
    ) -> "TenantContext":
        return cls(
            tenant_id=tenant.id,
            settings=TenantSettings.from_blob(tenant.settings),
            user_id=user_id,
            role=role,
        )

    @property
    def sees_all_bookings(self) -> bool:
        return check_can_view_all_bookings(self.role)


def _parse_uuid(value) -> Optional[UUID]:
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        return None


async def resolve_tenant_context(
    db: AsyncSession,
    api_key: Optional[str],
    bearer_token: Optional[str] = None,
) -> TenantContext:
    """
    Resolve the caller's tenant from the API key and, optionally, the user
    from a bearer token.

    Raises:
        Unauthenticated: no API key, or an invalid bearer token
        InvalidTenant: unknown key or inactive tenant
        Forbidden: the token belongs to another tenant
    """
    if not api_key:
        raise Unauthenticated("API key is required")

    tenant = await TenantRepository(db).get_active_by_api_key(api_key)
    if tenant is None:
        raise InvalidTenant()

    if not bearer_token:
        return TenantContext.for_tenant(tenant)

    payload = decode_access_token(bearer_token)
    if payload is None:
        raise Unauthenticated("Invalid authentication credentials")

    user_id = _parse_uuid(payload["user_id"])
    token_tenant_id = _parse_uuid(payload["tenant_id"])
    role = payload["role"]
    if user_id is None or token_tenant_id is None or role not in Roles.ALL or role == Roles.SERVICE:
        raise Unauthenticated("Invalid token payload")

    if token_tenant_id != tenant.id:
        raise Forbidden("User does not have access to this tenant")

    return TenantContext.for_tenant(tenant, user_id=user_id, role=role)
