# Engine and session factories for request handlers and background jobs
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from .config import get_settings
from .core.models import BaseModel

settings = get_settings()


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create the async engine, enabling FK enforcement on SQLite."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        # aiosqlite connections are used from the event loop thread and a worker thread
        connect_args["check_same_thread"] = False

    async_engine = create_async_engine(database_url, echo=echo, connect_args=connect_args)

    if database_url.startswith("sqlite"):
        from sqlalchemy import event

        # cascades on notes -> note_versions / note_locks rely on this
        @event.listens_for(async_engine.sync_engine, "connect")
        def _enable_sqlite_fk(dbapi_connection, connection_record):  # noqa: ANN001
            cursor = dbapi_connection.cursor()
            try:
                cursor.execute("PRAGMA foreign_keys=ON")
            finally:
                cursor.close()

    return async_engine


engine = build_engine(settings.database_url, echo=settings.database_echo)

# expire_on_commit=False: services keep using ORM objects after the lock/version commits
AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency yielding one session per request."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


@asynccontextmanager
async def session_scope(
    factory: async_sessionmaker = AsyncSessionLocal,
) -> AsyncIterator[AsyncSession]:
    """Session for work running outside a request (e.g. the lock sweeper)."""
    async with factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def create_tables():
    """Create all tables."""
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)


async def dispose_engine() -> None:
    """Close pooled connections on shutdown."""
    await engine.dispose()
