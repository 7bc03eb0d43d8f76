"""
Logging setup for the API process.

Modules log through ``logging.getLogger(__name__)``; this only configures the
root handler once at startup.
"""

import logging

from booking_engine.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger from LOG_LEVEL (idempotent)."""
    resolved = (level or settings.LOG_LEVEL or "INFO").upper()
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    logging.getLogger().setLevel(resolved)

    # SQL echo is controlled by DEBUG through the engine, keep the logger quiet otherwise
    if not settings.DEBUG:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
