"""Note service implementation."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import InvalidInputError, NoteNotFoundError, PermissionDeniedError
from ..logging import get_logger
from ..models.note import Note, NoteVisibility
from ..permissions import can_write, require_read
from ..repositories.note_repository import NoteRepository
from ..repositories.version_repository import VersionRepository
from ..schemas.notes import NoteCreate, NoteResponse, PermissionUpdate
from .interfaces import INoteService

logger = get_logger("notes")

INITIAL_VERSION_DESCRIPTION = "Initial version"


def build_note_response(note: Note, username: str, version_number: int) -> NoteResponse:
    """Shape a note for *username*."""
    return NoteResponse(
        id=note.id,
        title=note.title,
        content=note.content,
        owner_username=note.owner_username,
        visibility=note.visibility_enum,
        read_grants=list(note.read_grants or []),
        write_grants=list(note.write_grants or []),
        is_owner=note.is_owned_by(username),
        can_edit=can_write(note, username),
        version_number=version_number,
        created_at=note.created_at,
        updated_at=note.updated_at,
    )


async def load_note(note_repo: NoteRepository, note_id: UUID) -> Note:
    note = await note_repo.get_by_id(note_id)
    if note is None:
        raise NoteNotFoundError(note_id)
    return note


class NoteService(INoteService):
    """Note service implementation."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.note_repo = NoteRepository(session)
        self.version_repo = VersionRepository(session)

    async def _response(self, note: Note, username: str) -> NoteResponse:
        latest = await self.version_repo.latest(note.id)
        return build_note_response(note, username, latest.version_number if latest else 0)

    async def create_note(self, username: str, request: NoteCreate) -> NoteResponse:
        """Create a private note and record it as version 1 in one commit."""
        note = await self.note_repo.add(
            {
                "title": request.title,
                "content": request.content,
                "owner_username": username,
                "visibility": NoteVisibility.PRIVATE.value,
                "read_grants": [],
                "write_grants": [],
            }
        )
        version = await self.version_repo.append(note, username, INITIAL_VERSION_DESCRIPTION)

        logger.info("Note created", extra={"note_id": str(note.id), "username": username})
        return build_note_response(note, username, version.version_number)

    async def get_note(self, note_id: UUID, username: str) -> NoteResponse:
        note = await load_note(self.note_repo, note_id)
        require_read(note, username)
        return await self._response(note, username)

    async def update_permissions(
        self, note_id: UUID, username: str, request: PermissionUpdate
    ) -> NoteResponse:
        """
        Change who may read or write a note.

        - private: both grant sets are cleared
        - shared_read: read grants kept, write grants cleared
        - shared_write: both kept
        """
        note = await load_note(self.note_repo, note_id)
        if not note.is_owned_by(username):
            raise PermissionDeniedError(note_id, username, "owner")

        visibility = request.visibility
        if visibility is NoteVisibility.PRIVATE:
            note.set_grants()
        elif visibility is NoteVisibility.SHARED_READ:
            note.set_grants(read=request.read_grants)
        else:
            note.set_grants(read=request.read_grants, write=request.write_grants)
        note.visibility = visibility.value

        await self.note_repo.save(note)
        logger.info(
            "Note permissions updated",
            extra={
                "note_id": str(note_id),
                "username": username,
                "visibility": note.visibility,
                "read_grants": note.read_grants,
                "write_grants": note.write_grants,
            },
        )
        return await self._response(note, username)

    async def delete_note(self, note_id: UUID, username: str) -> None:
        note = await load_note(self.note_repo, note_id)
        if not note.is_owned_by(username):
            raise PermissionDeniedError(note_id, username, "owner")

        await self.note_repo.delete(note)
        logger.info("Note deleted", extra={"note_id": str(note_id), "username": username})

    async def leave_share(self, note_id: UUID, username: str) -> None:
        note = await load_note(self.note_repo, note_id)
        if note.is_owned_by(username):
            raise InvalidInputError(
                "Owners cannot remove themselves from their own note",
                details={"note_id": note_id},
            )
        if username not in (note.read_grants or []) and username not in (note.write_grants or []):
            raise PermissionDeniedError(note_id, username, "read")

        note.revoke(username)
        await self.note_repo.save(note)
        logger.info("User left shared note", extra={"note_id": str(note_id), "username": username})
