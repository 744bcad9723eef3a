"""Service test fixtures: async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh SQLite database file with foreign keys enforced
    - get_db and get_event_locks overridden per test (locks bound to the test's loop)
    - db_manager patched so the readiness probe sees the test engine

Design Decisions:
    - File-backed SQLite over :memory:: concurrent ledger tests open several sessions,
      and each must see the others' commits through its own connection
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from rollcall.db.base import Base
from rollcall.infrastructure.database import (
    DatabaseSessionManager, enable_sqlite_foreign_keys, get_db,
)
from rollcall.infrastructure.event_locks import EventLockRegistry, get_event_locks
from rollcall.models import Event, EventRequirement
import rollcall.infrastructure.database as db_module
from rollcall.main import app


@pytest.fixture
async def test_engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'rollcall.db'}", echo=False,
    )
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
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
def locks():
    return EventLockRegistry(timeout_seconds=2.0)


@pytest.fixture
async def client(test_engine, test_session_factory, locks):
    """FastAPI test client with DB and lock dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_event_locks] = lambda: locks

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


async def _make_event(session, **overrides) -> Event:
    data = {
        "scope_id": "guild-1", "title": "Raid night",
        "created_by": "organizer", "min_participants": 1,
        "max_participants": None, "status": "planning",
    }
    required = overrides.pop("required", [])
    data.update(overrides)
    event = Event(
        **data, requirements=[EventRequirement(member_id=m) for m in required],
    )
    session.add(event)
    await session.commit()
    await session.refresh(event)
    return event


@pytest.fixture
def make_event(test_db):
    """Factory: insert an Event with the given column overrides."""
    async def _factory(**overrides) -> Event:
        return await _make_event(test_db, **overrides)
    return _factory


@pytest.fixture
async def seed_event(make_event):
    """A PLANNING event with a single seat."""
    return await make_event(max_participants=1)
