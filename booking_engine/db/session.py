"""
Database session and engine configuration.

This file sets up the pooled async database connection using SQLAlchemy + asyncpg.
Each request gets its own session (and therefore its own transaction) from the pool.
"""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from booking_engine.core.config import settings


# Create the async database engine backed by a connection pool
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,  # When DEBUG=True, prints SQL queries to console
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
    pool_timeout=settings.DB_POOL_TIMEOUT,
    pool_recycle=settings.DB_POOL_RECYCLE,
    pool_pre_ping=True,
)

# Create a session factory
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,  # Keeps data accessible after commit
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Get a database session.

    Services commit their own units of work; anything left open when the
    request fails is rolled back here.

    Usage in a FastAPI endpoint:
        @router.get("/bookings")
        async def list_bookings(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with async_session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
