"""Health check router: API, database, connection pool and schema revision."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional, Tuple

from alembic.config import Config
from alembic.script import ScriptDirectory
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from booking_engine.db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter()

PROJECT_ROOT = Path(__file__).resolve().parents[2]


@lru_cache(maxsize=1)
def migration_head() -> Optional[str]:
    """Head revision of the bundled migrations, or None outside a source checkout."""
    cfg_path = PROJECT_ROOT / "alembic.ini"
    script_location = PROJECT_ROOT / "alembic"
    if not cfg_path.exists() or not script_location.exists():
        return None

    config = Config(str(cfg_path))
    config.set_main_option("script_location", str(script_location))
    return ScriptDirectory.from_config(config).get_current_head()


async def probe_database(db: AsyncSession) -> Tuple[bool, Optional[str]]:
    """(reachable, applied revision). The revision is None before the first migration."""
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.warning("Health check: database unreachable (%s)", exc.__class__.__name__)
        return False, None

    try:
        result = await db.execute(text("SELECT version_num FROM alembic_version"))
        return True, result.scalar_one_or_none()
    except SQLAlchemyError:
        await db.rollback()
        return True, None


@router.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Report whether bookings can be served: database reachable and schema at head."""
    db_ok, schema_revision = await probe_database(db)
    head = migration_head()

    return {
        "api_ok": True,
        "db_ok": db_ok,
        "pool": db.get_bind().pool.status(),
        "alembic_head_ok": bool(schema_revision and head and schema_revision == head),
        "alembic_current": schema_revision,
        "alembic_head": head,
    }
