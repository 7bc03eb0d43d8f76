"""
Pytest configuration and shared fixtures.

Service and API tests run against an in-memory SQLite database. Tests marked
``db`` need the PostgreSQL database from DATABASE_URL (with migrations applied).
"""

import os
import uuid
from types import SimpleNamespace

import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from booking_engine.core.permissions import Roles
from booking_engine.core.tenant_context import TenantContext
from booking_engine.db.base import Base
from booking_engine.models import Resource, Tenant


TEST_SQLITE_URL = "sqlite+aiosqlite:///:memory:"

TENANT_A_KEY = "key-tenant-a"
TENANT_B_KEY = "key-tenant-b"
INACTIVE_TENANT_KEY = "key-tenant-inactive"


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests, no external deps")
    config.addinivalue_line("markers", "db: requires database")
    config.addinivalue_line("markers", "server: requires running HTTP server")


def pytest_collection_modifyitems(config, items):
    run_db = os.environ.get("RUN_DB_TESTS") == "1"
    run_server = os.environ.get("RUN_SERVER_TESTS") == "1"

    skip_db = pytest.mark.skip(reason="db tests skipped by default; set RUN_DB_TESTS=1 to enable")
    skip_server = pytest.mark.skip(reason="server tests skipped by default; set RUN_SERVER_TESTS=1 to enable")

    for item in items:
        if "db" in item.keywords and not run_db:
            item.add_marker(skip_db)
        if "server" in item.keywords and not run_server:
            item.add_marker(skip_server)


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        TEST_SQLITE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # pysqlite's own transaction handling breaks SAVEPOINT; let SQLAlchemy emit BEGIN
    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def seeded(session_maker):
    """Two tenants with one resource each, an inactive resource and an inactive tenant."""
    tenant_a = Tenant(
        id=uuid.uuid4(),
        name="Tenant A",
        api_key=TENANT_A_KEY,
        settings={"timezone": "UTC", "business_hours": {"start_hour": 9, "end_hour": 18}},
        is_active=True,
    )
    tenant_b = Tenant(
        id=uuid.uuid4(),
        name="Tenant B",
        api_key=TENANT_B_KEY,
        settings=None,
        is_active=True,
    )
    inactive_tenant = Tenant(
        id=uuid.uuid4(),
        name="Dormant",
        api_key=INACTIVE_TENANT_KEY,
        is_active=False,
    )
    room = Resource(id=uuid.uuid4(), tenant_id=tenant_a.id, name="Room 1", capacity=1, is_active=True)
    van = Resource(id=uuid.uuid4(), tenant_id=tenant_a.id, name="Van", capacity=1, is_active=True)
    retired = Resource(id=uuid.uuid4(), tenant_id=tenant_a.id, name="Old Room", capacity=1, is_active=False)
    other_room = Resource(id=uuid.uuid4(), tenant_id=tenant_b.id, name="Room B", capacity=1, is_active=True)

    async with session_maker() as session:
        session.add_all([tenant_a, tenant_b, inactive_tenant])
        await session.flush()
        session.add_all([room, van, retired, other_room])
        await session.commit()

    return SimpleNamespace(
        tenant_a=tenant_a,
        tenant_b=tenant_b,
        inactive_tenant=inactive_tenant,
        room=room,
        van=van,
        retired=retired,
        other_room=other_room,
        ctx_a=TenantContext.for_tenant(tenant_a),
        ctx_b=TenantContext.for_tenant(tenant_b),
    )


@pytest.fixture
def user_context(seeded):
    """Build a TenantContext for a user of tenant A with the given role."""

    def build(role: str = Roles.USER, user_id=None) -> TenantContext:
        return TenantContext.for_tenant(seeded.tenant_a, user_id=user_id or uuid.uuid4(), role=role)

    return build
