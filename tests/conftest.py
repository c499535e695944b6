"""Shared pytest fixtures configured to use SQLite in-memory for unit tests."""

import logging
import os
from typing import Callable, Dict

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# The app lifespan must not touch the real database or start the sweeper
os.environ.setdefault("COLLABNOTES_SKIP_LIFESPAN_DB", "1")

from src.collabnotes.config import Settings, get_settings  # noqa: E402
from src.collabnotes.core.models import BaseModel  # noqa: E402
from src.collabnotes.core.schemas.notes import NoteCreate, PermissionUpdate  # noqa: E402
from src.collabnotes.core.services import NoteService  # noqa: E402
from src.collabnotes.database import get_db_session  # noqa: E402
from src.collabnotes.main import app  # noqa: E402
from src.collabnotes.security.jwt import create_access_token  # noqa: E402

# Silence extremely verbose DEBUG logs from aiosqlite to keep test output readable
logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def enable_sqlite_fk(engine) -> None:
    """Enforce foreign keys so ON DELETE CASCADE behaves as on PostgreSQL."""

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):  # noqa: ANN001
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA foreign_keys=ON")
        finally:
            cursor.close()


@pytest.fixture
def test_settings():
    """Settings for tests: in-memory SQLite, no sweeper."""
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        secret_key="test-secret-key",
        debug=True,
        lock_ttl_minutes=5,
        lock_sweep_enabled=False,
    )


@pytest.fixture
async def test_engine(test_settings):
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        test_settings.database_url,
        echo=False,
        poolclass=StaticPool,  # keep the same memory DB across connections
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_fk(engine)

    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_session(session_factory):
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()


@pytest.fixture
def override_get_db(test_session):
    """Override the get_db dependency."""

    async def _override_get_db():
        yield test_session

    return _override_get_db


@pytest.fixture
def test_app(override_get_db, test_settings):
    """FastAPI app wired to the test session and settings."""
    app.dependency_overrides[get_db_session] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(test_app):
    """HTTP client running the app on the test's own event loop."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth_headers() -> Callable[[str], Dict[str, str]]:
    """Build bearer headers for any username."""

    def _headers(username: str) -> Dict[str, str]:
        token = create_access_token({"sub": username})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def note_service(test_session):
    return NoteService(test_session)


@pytest.fixture
def make_note(note_service):
    """Create a note owned by *owner*; optionally share it in the same call."""

    async def _make(
        owner: str = "alice",
        title: str = "T1",
        content: str = "first body",
        visibility: str = None,
        read_grants=(),
        write_grants=(),
    ):
        note = await note_service.create_note(owner, NoteCreate(title=title, content=content))
        if visibility is not None:
            note = await note_service.update_permissions(
                note.id,
                owner,
                PermissionUpdate(
                    visibility=visibility,
                    read_grants=list(read_grants),
                    write_grants=list(write_grants),
                ),
            )
        return note

    return _make
