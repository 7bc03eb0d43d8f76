"""
Resource Pydantic schemas.
"""

from typing import Optional

from booking_engine.schemas.base import TenantScopedRead


class ResourceRead(TenantScopedRead):
    """Schema for reading resource data (API response)."""

    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    capacity: int
    location: Optional[str] = None
    settings: Optional[dict] = None
    is_active: bool
