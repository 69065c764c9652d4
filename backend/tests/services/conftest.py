"""Service test fixtures — async DB, FastAPI test client and seeded catalog.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched so readiness probes hit the test engine
    - Seed fixtures return plain ids: a rollback inside a service expires ORM
      objects, and expired attributes cannot lazy-load in async tests

Design Decisions:
    - SQLite in-memory: fast, no external dependency; the unique and check
      constraints under test are enforced by SQLite as well
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from whiteloop.core.domain_types import Role
from whiteloop.db.base import Base
from whiteloop.infrastructure.database import get_db, DatabaseSessionManager
import whiteloop.infrastructure.database as db_module
import whiteloop.models  # noqa: F401
from whiteloop.main import app
from whiteloop.services.user_directory import upsert_profile

from tests.services.factories import SCREENER_CRITERIA, make_caller, seed_study


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    # Readiness probe reads db_manager directly
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
def researcher():
    return make_caller(Role.RESEARCHER)


@pytest.fixture
def participant():
    return make_caller(Role.PARTICIPANT)


@pytest.fixture
def service():
    return make_caller(Role.SERVICE)


@pytest.fixture
async def seeded(test_db, researcher):
    """Project + study with a weighted screener (manual review below 3)."""
    return await seed_study(
        test_db, researcher, {"criteria": SCREENER_CRITERIA, "questions": []},
    )


@pytest.fixture
async def profiled_participant(test_db, participant):
    """Participant whose profile passes the country rule (weight 1)."""
    await upsert_profile(test_db, participant, {
        "languages": ["pt", "en"],
        "demographics": {"country": "BR"},
    })
    return participant
