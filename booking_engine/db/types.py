"""
Column types shared by the models.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.types import TypeDecorator

from booking_engine.utils.time import ensure_utc


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware timestamp that always round-trips as UTC.

    PostgreSQL stores it as TIMESTAMPTZ. Backends without native time zone
    support (SQLite in tests) store naive UTC, and values read back are tagged UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        value = ensure_utc(value)
        if dialect.name != "postgresql":
            return value.replace(tzinfo=None)
        return value

    def process_result_value(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


# JSONB on PostgreSQL, plain JSON elsewhere
JSONType = JSON().with_variant(JSONB(), "postgresql")
