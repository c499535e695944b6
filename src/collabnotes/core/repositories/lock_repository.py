"""Lock repository: the only code that writes ``note_locks`` rows.

Two layers keep acquisition exclusive:

* a unique constraint on ``note_locks.note_id`` so the database rejects a
  second row for the same note, whichever process inserts it;
* a per-note ``asyncio.Lock`` so coroutines in this process serialize their
  read-check-write on a note instead of racing into that constraint.
"""

import asyncio
import weakref
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import LockConflictError, LockNotHeldError
from ..logging import get_logger
from ..models.base import as_utc, utcnow
from ..models.lock import NoteLock

logger = get_logger("locks")

# entries vanish once no coroutine holds a reference to the guard
_note_guards: "weakref.WeakValueDictionary[UUID, asyncio.Lock]" = weakref.WeakValueDictionary()


def note_guard(note_id: UUID) -> asyncio.Lock:
    """Return the in-process guard for *note_id*, creating it if needed."""
    guard = _note_guards.get(note_id)
    if guard is None:
        guard = asyncio.Lock()
        _note_guards[note_id] = guard
    return guard


@dataclass(frozen=True)
class LockState:
    """Observable lock state of a note at a given instant."""

    locked: bool
    holder: Optional[str] = None
    expires_at: Optional[datetime] = None

    def held_by(self, username: str) -> bool:
        return self.locked and self.holder == username


UNLOCKED = LockState(locked=False)


class LockRepository:
    """Repository for edit lock operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_row(self, note_id: UUID) -> Optional[NoteLock]:
        # populate_existing: another session may have replaced the row since we last looked
        stmt = (
            select(NoteLock)
            .where(NoteLock.note_id == note_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_active(self, note_id: UUID, now: Optional[datetime] = None) -> Optional[NoteLock]:
        """Return the note's lock if it has not expired, else None."""
        row = await self._get_row(note_id)
        if row is None or row.is_expired(now):
            return None
        return row

    async def status(self, note_id: UUID, now: Optional[datetime] = None) -> LockState:
        row = await self.get_active(note_id, now)
        if row is None:
            return UNLOCKED
        return LockState(locked=True, holder=row.locked_by, expires_at=as_utc(row.expires_at))

    async def acquire(
        self,
        note_id: UUID,
        username: str,
        ttl: timedelta,
        now: Optional[datetime] = None,
    ) -> NoteLock:
        """
        Take or renew the edit lock on a note.

        - no lock, or only an expired one: a fresh lock for *username*
        - active lock held by *username*: expiry pushed to ``now + ttl``
        - active lock held by someone else: LockConflictError
        """
        now = as_utc(now) if now is not None else utcnow()
        expires_at = now + ttl

        async with note_guard(note_id):
            row = await self._get_row(note_id)

            if row is not None and row.is_active(now):
                if row.locked_by != username:
                    raise LockConflictError(note_id, row.locked_by, as_utc(row.expires_at))
                row.expires_at = expires_at
                await self.session.commit()
                logger.debug(
                    "Lock renewed on acquire",
                    extra={"note_id": str(note_id), "username": username, "expires_at": expires_at},
                )
                return row

            if row is not None:
                # stale row: drop it by id so a concurrent taker's fresh row is untouched
                await self.session.execute(
                    delete(NoteLock)
                    .where(NoteLock.id == row.id)
                    .execution_options(synchronize_session=False)
                )
                self.session.expunge(row)

            lock = NoteLock(note_id=note_id, locked_by=username, locked_at=now, expires_at=expires_at)
            self.session.add(lock)
            try:
                await self.session.commit()
            except IntegrityError:
                # another process inserted first
                await self.session.rollback()
                current = await self.get_active(note_id, now)
                holder = current.locked_by if current is not None else None
                raise LockConflictError(
                    note_id, holder, as_utc(current.expires_at) if current is not None else None
                )

        logger.info(
            "Lock acquired",
            extra={"note_id": str(note_id), "username": username, "expires_at": expires_at},
        )
        return lock

    async def renew(
        self,
        note_id: UUID,
        username: str,
        ttl: timedelta,
        now: Optional[datetime] = None,
    ) -> NoteLock:
        """Extend a lock the caller already holds; LockNotHeldError otherwise."""
        now = as_utc(now) if now is not None else utcnow()

        async with note_guard(note_id):
            row = await self.get_active(note_id, now)
            if row is None or row.locked_by != username:
                raise LockNotHeldError(note_id, username, row.locked_by if row is not None else None)
            row.expires_at = now + ttl
            await self.session.commit()

        logger.debug(
            "Lock extended",
            extra={"note_id": str(note_id), "username": username, "expires_at": row.expires_at},
        )
        return row

    async def release(self, note_id: UUID, username: str, now: Optional[datetime] = None) -> bool:
        """
        Drop the caller's lock.

        Returns False when there is no active lock. Raises LockNotHeldError
        when the active lock belongs to someone else.
        """
        async with note_guard(note_id):
            row = await self.get_active(note_id, now)
            if row is None:
                return False
            if row.locked_by != username:
                raise LockNotHeldError(note_id, username, row.locked_by)
            await self.session.delete(row)
            await self.session.commit()

        logger.info("Lock released", extra={"note_id": str(note_id), "username": username})
        return True

    async def sweep_expired(self, now: Optional[datetime] = None) -> int:
        """Delete every lock whose expiry has passed. Returns the number removed."""
        now = as_utc(now) if now is not None else utcnow()
        result = await self.session.execute(
            delete(NoteLock)
            .where(NoteLock.expires_at <= now)
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()
        return result.rowcount or 0
