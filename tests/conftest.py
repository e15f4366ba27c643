"""
Shared test fixtures for the Workday test suite.

Every test gets a fresh in-memory SQLite database (aiosqlite + StaticPool)
and the app's DB dependency is pointed at it.  Auth guards are overridden
with an admin user unless a test asks for ``real_auth``.
"""

import os
import sys
from typing import AsyncGenerator

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CORS_ORIGINS"] = '["*"]'
os.environ["LOGIN_RATE_LIMIT"] = "1000/minute"
os.environ["TIMEZONE"] = "UTC"

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from workday.api.v1.deps import get_current_active_user, get_db, require_admin
from workday.db.base import Base
from workday.db.session import build_engine, build_session_factory
from workday.db.store import SqlRecordStore
from workday.main import app
from workday.models.employee import Employee
from workday.models.user import ROLE_ADMIN, ROLE_EMPLOYEE, User


@pytest.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """Fresh schema per test, dependency override pointed at it."""
    test_engine = build_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = build_session_factory(test_engine)

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    yield factory
    app.dependency_overrides.pop(get_db, None)
    await test_engine.dispose()


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Raw database session for direct queries and engine-level tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def store(db_session: AsyncSession) -> SqlRecordStore:
    return SqlRecordStore(db_session)


@pytest.fixture
async def async_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# ── Auth Overrides ──────────────────────────────────────────────────
async def _override_get_current_active_user():
    return User(id=1, email="test@example.com", is_active=True, role=ROLE_ADMIN)


async def _override_require_admin():
    return User(id=1, email="admin@example.com", is_active=True, role=ROLE_ADMIN)


@pytest.fixture(autouse=True)
def auth_overrides():
    app.dependency_overrides[get_current_active_user] = _override_get_current_active_user
    app.dependency_overrides[require_admin] = _override_require_admin
    yield
    app.dependency_overrides.pop(get_current_active_user, None)
    app.dependency_overrides.pop(require_admin, None)


@pytest.fixture
def real_auth(auth_overrides):
    """Drop the auth overrides so guards run against real tokens."""
    app.dependency_overrides.pop(get_current_active_user, None)
    app.dependency_overrides.pop(require_admin, None)
    yield


# ── Factories ───────────────────────────────────────────────────────
@pytest.fixture
def make_employee(session_factory):
    """Insert an employee (and its account) in its own committed session."""
    counter = {"n": 0}

    async def _make(name: str = "Test Employee", code: str | None = None, **fields) -> Employee:
        counter["n"] += 1
        code = code or f"EMP-{counter['n']:03d}"
        async with session_factory() as session:
            user = User(
                email=f"{code.lower()}@example.com",
                hashed_password="!",
                full_name=name,
                role=ROLE_EMPLOYEE,
            )
            session.add(user)
            await session.flush()
            employee = Employee(employee_code=code, name=name, user_id=user.id, **fields)
            session.add(employee)
            await session.commit()
            await session.refresh(employee)
            return employee

    return _make
