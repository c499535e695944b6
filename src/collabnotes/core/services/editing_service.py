"""Edit orchestration: the only path by which a note's content changes.

Per note and user the lock is in one of three states, always read fresh
from the lock table: unlocked, locked by the caller, locked by someone else.
Saving requires the second, writes the note and its new version in one
commit, and then drops the lock.
"""

from datetime import timedelta
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ...config import Settings, get_settings
from ..exceptions import (
    InvalidVersionNumberError,
    LockConflictError,
    LockNotHeldError,
    LockRequiredError,
    VersionNotFoundError,
)
from ..logging import get_logger
from ..permissions import can_write, require_read, require_write
from ..repositories.lock_repository import LockRepository, LockState
from ..repositories.note_repository import NoteRepository
from ..repositories.version_repository import VersionRepository
from ..schemas.editing import LockStatusResponse
from ..schemas.notes import NoteResponse
from .interfaces import IEditingService
from .note_service import build_note_response, load_note

logger = get_logger("editing")


def validate_version_number(version_number) -> int:
    if isinstance(version_number, bool) or not isinstance(version_number, int) or version_number < 1:
        raise InvalidVersionNumberError(version_number)
    return version_number


def _status_response(note_id: UUID, username: str, state: LockState, writable: bool) -> LockStatusResponse:
    mine = state.held_by(username)
    return LockStatusResponse(
        note_id=note_id,
        locked=state.locked,
        locked_by=state.holder,
        expires_at=state.expires_at,
        is_locked_by_me=mine,
        can_edit=writable and (not state.locked or mine),
    )


class EditingService(IEditingService):
    """Edit orchestrator implementation."""

    def __init__(self, session: AsyncSession, settings: Optional[Settings] = None):
        self.session = session
        self.settings = settings or get_settings()
        self.note_repo = NoteRepository(session)
        self.lock_repo = LockRepository(session)
        self.version_repo = VersionRepository(session)

    @property
    def lock_ttl(self) -> timedelta:
        return timedelta(minutes=self.settings.lock_ttl_minutes)

    async def begin_edit(self, note_id: UUID, username: str) -> LockStatusResponse:
        """Take (or renew) the edit lock. Conflict if someone else holds it."""
        note = await load_note(self.note_repo, note_id)
        require_write(note, username)

        try:
            lock = await self.lock_repo.acquire(note_id, username, self.lock_ttl)
        except LockConflictError as e:
            logger.info(
                "Edit lock refused",
                extra={"note_id": str(note_id), "username": username, "locked_by": e.holder},
            )
            raise

        state = LockState(locked=True, holder=lock.locked_by, expires_at=lock.expires_at)
        return _status_response(note_id, username, state, writable=True)

    async def save(
        self,
        note_id: UUID,
        username: str,
        title: str,
        content: str,
        change_description: Optional[str] = None,
    ) -> NoteResponse:
        """Apply an edit as a new version, then release the caller's lock."""
        note = await load_note(self.note_repo, note_id)
        require_write(note, username)

        state = await self.lock_repo.status(note_id)
        if not state.locked:
            raise LockRequiredError(note_id)
        if state.holder != username:
            raise LockConflictError(note_id, state.holder, state.expires_at)

        note.title = title
        note.content = content
        version = await self.version_repo.append(note, username, change_description)

        try:
            await self.lock_repo.release(note_id, username)
        except LockNotHeldError as e:
            # lock lapsed and was retaken after the version was written
            logger.warning(
                "Lock changed hands before release",
                extra={"note_id": str(note_id), "username": username, "locked_by": e.holder},
            )

        logger.info(
            "Note saved",
            extra={
                "note_id": str(note_id),
                "username": username,
                "version_number": version.version_number,
            },
        )
        return build_note_response(note, username, version.version_number)

    async def restore(self, note_id: UUID, username: str, version_number: int) -> NoteResponse:
        """Save an earlier version's title and content as a new version."""
        validate_version_number(version_number)

        note = await load_note(self.note_repo, note_id)
        require_write(note, username)

        target = await self.version_repo.get(note_id, version_number)
        if target is None:
            raise VersionNotFoundError(note_id, version_number)

        await self.begin_edit(note_id, username)
        response = await self.save(
            note_id,
            username,
            target.title,
            target.content,
            f"Restored from version {version_number}",
        )

        logger.info(
            "Note restored",
            extra={
                "note_id": str(note_id),
                "username": username,
                "restored_from": version_number,
                "version_number": response.version_number,
            },
        )
        return response

    async def cancel_edit(self, note_id: UUID, username: str) -> bool:
        """Drop the caller's lock without saving. False if nothing was held."""
        await load_note(self.note_repo, note_id)
        return await self.lock_repo.release(note_id, username)

    async def lock_status_for(self, note_id: UUID, username: str) -> LockStatusResponse:
        note = await load_note(self.note_repo, note_id)
        require_read(note, username)

        state = await self.lock_repo.status(note_id)
        return _status_response(note_id, username, state, writable=can_write(note, username))

    async def extend_lock(self, note_id: UUID, username: str) -> LockStatusResponse:
        """Push the caller's lock expiry out by one TTL from now."""
        note = await load_note(self.note_repo, note_id)
        require_write(note, username)

        lock = await self.lock_repo.renew(note_id, username, self.lock_ttl)
        state = LockState(locked=True, holder=lock.locked_by, expires_at=lock.expires_at)
        return _status_response(note_id, username, state, writable=True)
