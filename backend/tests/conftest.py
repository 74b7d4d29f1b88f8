"""Root conftest — shared test configuration and database fixtures.

Invariants:
    - Every test gets a fresh in-memory SQLite database with foreign keys enforced
    - get_db dependency overridden to use the test session factory
    - db_manager patched so readiness checks hit the test DB

Design Decisions:
    - SQLite in-memory + StaticPool: one shared connection, no external dependency;
      ON CONFLICT upserts and ON DELETE cascades behave as on PostgreSQL
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

import fedlink.infrastructure.database as db_module  # noqa: E402
from fedlink.db.schema import create_schema, drop_schema  # noqa: E402
from fedlink.db.session import create_engine_for, create_session_factory  # noqa: E402
from fedlink.infrastructure.database import DatabaseSessionManager, get_db  # noqa: E402
from fedlink.main import app  # noqa: E402
from fedlink.models.user import User  # noqa: E402


@pytest.fixture
async def test_engine():
    engine = create_engine_for("sqlite+aiosqlite:///:memory:")
    await create_schema(engine)
    yield engine
    await drop_schema(engine)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return create_session_factory(test_engine)


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def make_user(test_db):
    """Insert a user directly; returns the ORM row."""
    counter = {"n": 0}

    async def _make(username: str | None = None, **fields) -> User:
        counter["n"] += 1
        name = username or f"user{counter['n']}"
        user = User(username=name, email=f"{name}@example.com", **fields)
        test_db.add(user)
        await test_db.commit()
        return user

    return _make


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def login(client):
    """Sign the test client in as `username`; returns the user JSON."""
    async def _login(username: str, **claims) -> dict:
        res = await client.post(
            "/api/v1/auth/login", json={"username": username, **claims},
        )
        assert res.status_code == 200, res.text
        return res.json()

    return _login
