"""
Audit record Pydantic schemas.
"""

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class AuditRecordRead(BaseModel):
    """Schema for reading an audit record (API response)."""

    id: UUID
    tenant_id: UUID
    booking_id: UUID
    action: str
    old_values: Optional[Dict[str, Any]] = None
    new_values: Optional[Dict[str, Any]] = None
    performed_by: Optional[UUID] = None
    performed_at: datetime

    model_config = ConfigDict(from_attributes=True)
