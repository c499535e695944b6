"""
Lock exclusivity across independent sessions.

Runs against a file-backed SQLite database so every session gets its own
connection, the way separate requests do in the running app.
"""

import asyncio
from datetime import timedelta

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.collabnotes.core.exceptions import LockConflictError
from src.collabnotes.core.models import BaseModel, NoteLock, utcnow
from src.collabnotes.core.repositories.lock_repository import LockRepository
from src.collabnotes.core.schemas.notes import NoteCreate, PermissionUpdate
from src.collabnotes.core.services import EditingService, LockSweeper, NoteService
from src.collabnotes.database import build_engine

TTL = timedelta(minutes=5)


@pytest.fixture
async def file_factory(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'locks.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)
    try:
        yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    finally:
        await engine.dispose()


@pytest.fixture
async def shared_note(file_factory):
    async with file_factory() as session:
        service = NoteService(session)
        note = await service.create_note("alice", NoteCreate(title="T1", content="body1"))
        await service.update_permissions(
            note.id,
            "alice",
            PermissionUpdate(visibility="shared_write", write_grants=["bob"]),
        )
    return note.id


async def count_locks(factory, note_id) -> int:
    async with factory() as session:
        result = await session.execute(
            select(func.count()).select_from(NoteLock).where(NoteLock.note_id == note_id)
        )
        return result.scalar_one()


async def test_simultaneous_begin_edit_has_one_winner(file_factory, shared_note):
    async def attempt(username):
        async with file_factory() as session:
            try:
                await EditingService(session).begin_edit(shared_note, username)
            except LockConflictError as exc:
                return ("conflict", exc.holder)
            return ("locked", username)

    results = await asyncio.gather(attempt("alice"), attempt("bob"))

    outcomes = sorted(r[0] for r in results)
    assert outcomes == ["conflict", "locked"]
    winner = next(r[1] for r in results if r[0] == "locked")
    loser_saw = next(r[1] for r in results if r[0] == "conflict")
    assert loser_saw == winner
    assert await count_locks(file_factory, shared_note) == 1


async def test_many_contenders_one_row(file_factory, shared_note):
    async def attempt(session_factory, username):
        async with session_factory() as session:
            try:
                await LockRepository(session).acquire(shared_note, username, TTL)
                return True
            except LockConflictError:
                return False

    results = await asyncio.gather(
        *(attempt(file_factory, name) for name in ["alice", "bob", "alice", "bob", "alice"])
    )

    assert any(results)
    assert await count_locks(file_factory, shared_note) == 1


async def test_insert_race_reported_as_conflict(file_factory, shared_note):
    """A row inserted behind our back surfaces as a conflict, not an IntegrityError."""
    async with file_factory() as session:
        await LockRepository(session).acquire(shared_note, "alice", TTL)

    async with file_factory() as session:
        repo = LockRepository(session)
        real_get_row = repo._get_row
        calls = []

        async def stale_get_row(note_id):
            calls.append(note_id)
            if len(calls) == 1:
                return None
            return await real_get_row(note_id)

        repo._get_row = stale_get_row

        with pytest.raises(LockConflictError) as exc_info:
            await repo.acquire(shared_note, "bob", TTL)

    assert exc_info.value.holder == "alice"
    assert await count_locks(file_factory, shared_note) == 1


async def test_expired_lock_taken_over_from_other_session(file_factory, shared_note):
    past = utcnow() - timedelta(minutes=10)
    async with file_factory() as session:
        await LockRepository(session).acquire(shared_note, "alice", TTL, now=past)

    async with file_factory() as session:
        status = await EditingService(session).begin_edit(shared_note, "bob")

    assert status.locked_by == "bob"
    assert await count_locks(file_factory, shared_note) == 1


async def test_save_from_second_session_after_lock(file_factory, shared_note):
    async with file_factory() as session:
        await EditingService(session).begin_edit(shared_note, "bob")

    async with file_factory() as session:
        note = await EditingService(session).save(
            shared_note, "bob", "T2", "body2", "second draft"
        )

    assert note.version_number == 2
    assert await count_locks(file_factory, shared_note) == 0


async def test_sweeper_clears_expired_locks(file_factory, shared_note):
    past = utcnow() - timedelta(minutes=10)
    async with file_factory() as session:
        await LockRepository(session).acquire(shared_note, "alice", TTL, now=past)

    sweeper = LockSweeper(file_factory, interval_seconds=60)
    assert await sweeper.run_once() == 1
    assert await count_locks(file_factory, shared_note) == 0
    assert await sweeper.run_once() == 0
