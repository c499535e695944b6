"""Version history service implementation."""

from typing import List
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import VersionNotFoundError
from ..models.version import NoteVersion
from ..permissions import require_read
from ..repositories.note_repository import NoteRepository
from ..repositories.version_repository import VersionRepository
from ..schemas.versions import NoteVersionResponse, VersionComparisonResponse
from .editing_service import validate_version_number
from .interfaces import IVersionService
from .note_service import load_note


class VersionService(IVersionService):
    """Read-only history access; every call requires read permission."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.note_repo = NoteRepository(session)
        self.version_repo = VersionRepository(session)

    async def _readable(self, note_id: UUID, username: str) -> None:
        note = await load_note(self.note_repo, note_id)
        require_read(note, username)

    async def _fetch(self, note_id: UUID, version_number: int) -> NoteVersion:
        validate_version_number(version_number)
        version = await self.version_repo.get(note_id, version_number)
        if version is None:
            raise VersionNotFoundError(note_id, version_number)
        return version

    async def history(self, note_id: UUID, username: str) -> List[NoteVersionResponse]:
        """Newest first."""
        await self._readable(note_id, username)
        versions = await self.version_repo.history(note_id)
        return [NoteVersionResponse.model_validate(v) for v in versions]

    async def get_version(
        self, note_id: UUID, username: str, version_number: int
    ) -> NoteVersionResponse:
        await self._readable(note_id, username)
        version = await self._fetch(note_id, version_number)
        return NoteVersionResponse.model_validate(version)

    async def compare(
        self, note_id: UUID, username: str, version1: int, version2: int
    ) -> VersionComparisonResponse:
        """Field-equality comparison; comparing a version with itself reports no changes."""
        await self._readable(note_id, username)
        first = await self._fetch(note_id, version1)
        second = await self._fetch(note_id, version2)

        diff = first.diff(second)
        return VersionComparisonResponse(
            note_id=note_id,
            version1=NoteVersionResponse.model_validate(first),
            version2=NoteVersionResponse.model_validate(second),
            title_changed=diff.title_changed,
            content_changed=diff.content_changed,
            summary=diff.summary,
        )
