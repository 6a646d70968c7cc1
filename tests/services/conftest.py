"""Service test fixtures — async DB, in-memory store and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched so the readiness probe sees the test engine
    - Tool registry built with a canned notebook author writing into tmp_path

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific ON CONFLICT is exercised through the sqlite dialect)
    - Manager unit tests run against InMemoryStore, route tests against SqlStore
"""

import pytest
from fastapi import Depends
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

import mentorflow.infrastructure.database as db_module
from mentorflow.api.dependencies import get_store, get_tool_registry
from mentorflow.db.base import Base
from mentorflow.infrastructure.database import get_db, DatabaseSessionManager
from mentorflow.infrastructure.sql_store import SqlStore
from mentorflow.main import app
from mentorflow.models.student import Student
from mentorflow.services.tool_dispatch import create_full_tool_registry
from tests.services.fakes import InMemoryStore, CannedNotebookAuthor


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
def sql_store(test_db):
    return SqlStore(test_db)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def author():
    return CannedNotebookAuthor()


@pytest.fixture
async def client(test_engine, test_session_factory, author, tmp_path):
    """FastAPI test client with DB and notebook author overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    def override_get_tool_registry(store: SqlStore = Depends(get_store)):
        return create_full_tool_registry(store, author, tmp_path, "http://test")

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_tool_registry] = override_get_tool_registry

    original_manager = db_module.db_manager
    db_module.db_manager = DatabaseSessionManager(test_engine)

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


async def _insert_student(db: AsyncSession, **kwargs) -> Student:
    student = Student(name="Ada", email="ada@example.com", **kwargs)
    db.add(student)
    await db.commit()
    await db.refresh(student)
    return student


@pytest.fixture
async def seed_student(test_db):
    """Phase I student row."""
    return await _insert_student(test_db)


@pytest.fixture
async def seed_phase2_student(test_db):
    return await _insert_student(test_db, current_phase="phase2")
