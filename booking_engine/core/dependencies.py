"""
FastAPI dependencies for the application.
"""

from typing import Optional

from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from booking_engine.core.tenant_context import TenantContext, resolve_tenant_context
from booking_engine.db.session import get_db

# Bearer token is optional: an API key alone acts as the tenant's service integration
security = HTTPBearer(auto_error=False)

__all__ = ["get_db", "get_tenant_context"]


async def get_tenant_context(
    x_api_key: Optional[str] = Header(None),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> TenantContext:
    """
    Resolve the tenant from the X-API-Key header and the user from an optional
    bearer token.

    Raises:
        Unauthenticated: missing API key or invalid token (401)
        InvalidTenant: unknown key or inactive tenant (403)
        Forbidden: token issued for another tenant (403)
    """
    token = credentials.credentials if credentials else None
    return await resolve_tenant_context(db, x_api_key, token)
