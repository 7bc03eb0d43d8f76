"""
Typed view of the tenant configuration blob.

The engine interprets only ``timezone`` and ``business_hours``. The other named
fields are carried for collaborators; unrecognised keys land in ``extra``.
"""

import logging
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from booking_engine.core.config import settings
from booking_engine.scheduling.planner import BusinessHours

logger = logging.getLogger(__name__)


class BusinessHoursConfig(BaseModel):
    start_hour: int = Field(default_factory=lambda: settings.DEFAULT_BUSINESS_HOURS_START, ge=0, le=23)
    end_hour: int = Field(default_factory=lambda: settings.DEFAULT_BUSINESS_HOURS_END, ge=1, le=24)

    @model_validator(mode="after")
    def check_order(self):
        if self.start_hour >= self.end_hour:
            raise ValueError("business_hours.start_hour must be before end_hour")
        return self


class AdvanceBookingConfig(BaseModel):
    min_notice_minutes: Optional[int] = Field(default=None, ge=0)
    max_advance_days: Optional[int] = Field(default=None, ge=0)


class TenantSettings(BaseModel):
    """Parsed tenant configuration."""

    timezone: str = "UTC"
    business_hours: BusinessHoursConfig = Field(default_factory=BusinessHoursConfig)
    advance_booking: Optional[AdvanceBookingConfig] = None
    service_areas: List[Any] = Field(default_factory=list)
    extra: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown timezone {value!r}") from exc
        return value

    @classmethod
    def from_blob(cls, blob: Optional[Dict[str, Any]]) -> "TenantSettings":
        """
        Build settings from the stored blob.

        A malformed blob falls back to defaults (its keys are kept in ``extra``).
        """
        if not blob:
            return cls()
        known = set(cls.model_fields) - {"extra"}
        data = {key: value for key, value in blob.items() if key in known}
        data["extra"] = {key: value for key, value in blob.items() if key not in known}
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            logger.warning("Invalid tenant settings, using defaults: %s", exc.errors())
            return cls(extra=dict(blob))

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @property
    def policy_window(self) -> BusinessHours:
        return BusinessHours(
            start_hour=self.business_hours.start_hour,
            end_hour=self.business_hours.end_hour,
        )
