"""Shared test fixtures for pytest"""
import os

# Settings are read at import time; point them at SQLite before importing src
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import (AsyncSession, async_sessionmaker,  # noqa: E402
                                    create_async_engine)
from sqlalchemy.pool import StaticPool  # noqa: E402

from main import app  # noqa: E402
from scripts.seed_rbac import seed_rbac  # noqa: E402
from src.infrastructure.persistence.database import (  # noqa: E402
    Base, get_db, get_db_transactional)
from src.infrastructure.persistence.models import Place, Role, User  # noqa: E402
from tests.factories import (auth_headers_for, create_place,  # noqa: E402
                             create_user, grant_role)

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def test_engine():
    """In-memory SQLite engine with working SAVEPOINT support"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # pysqlite's own transaction handling breaks SAVEPOINT; emit BEGIN ourselves
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
async def test_db(test_engine):
    """Create test database session"""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
        autocommit=False,
    )

    async with async_session() as session:
        yield session


@pytest.fixture
async def client(test_db):
    """HTTP client for API testing; reads and writes share the test session"""

    async def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_db_transactional] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def seeded_roles(test_db) -> dict[str, Role]:
    """Default roles (admin, editor, client, owner) keyed by slug"""
    return await seed_rbac(test_db)


@pytest.fixture
async def admin_user(test_db, seeded_roles) -> User:
    user = await create_user(test_db, "admin-user", name="Ada Admin")
    await grant_role(test_db, user.id, seeded_roles["admin"].id)
    return user


@pytest.fixture
async def editor_user(test_db, seeded_roles) -> User:
    user = await create_user(test_db, "editor-user", name="Eddie Editor")
    await grant_role(test_db, user.id, seeded_roles["editor"].id)
    return user


@pytest.fixture
async def owner_user(test_db, seeded_roles) -> User:
    user = await create_user(test_db, "owner-user", name="Olive Owner")
    await grant_role(test_db, user.id, seeded_roles["owner"].id)
    return user


@pytest.fixture
async def plain_user(test_db, seeded_roles) -> User:
    """User holding no roles"""
    return await create_user(test_db, "plain-user", name="Pat Plain")


@pytest.fixture
async def owned_place(test_db, owner_user) -> Place:
    return await create_place(test_db, "place-1", owner_user.id)


@pytest.fixture
def admin_headers(admin_user):
    """Generate auth headers with JWT token for the admin"""
    return auth_headers_for(admin_user.id)
