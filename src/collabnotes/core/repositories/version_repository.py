"""Version repository: append-only history of note snapshots."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import desc, func, inspect, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import VersionNumberingError
from ..logging import get_logger
from ..models.note import Note
from ..models.version import NoteVersion

logger = get_logger("versions")


class VersionRepository:
    """Repository for note version operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def next_version_number(self, note_id: UUID) -> int:
        stmt = select(func.coalesce(func.max(NoteVersion.version_number), 0)).where(
            NoteVersion.note_id == note_id
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one()) + 1

    async def append(
        self,
        note: Note,
        author: str,
        change_description: Optional[str] = None,
    ) -> NoteVersion:
        """
        Snapshot the note's current title and content as its next version.

        Commits together with whatever changes are pending on *note*, so the
        note's fields and its newest version never disagree. If another writer
        claims the same number first, the transaction is replayed once with a
        fresh number; a second collision raises VersionNumberingError.
        """
        note_id, title, content = note.id, note.title, note.content

        for attempt in (1, 2):
            number = await self.next_version_number(note_id)
            version = NoteVersion(
                note_id=note_id,
                version_number=number,
                title=title,
                content=content,
                created_by=author,
                change_description=change_description,
            )
            self.session.add(version)
            try:
                await self.session.commit()
            except IntegrityError:
                await self.session.rollback()
                if attempt == 2:
                    logger.error(
                        "Version number allocation failed twice",
                        extra={"note_id": str(note_id), "version_number": number},
                    )
                    raise VersionNumberingError(note_id)
                logger.warning(
                    "Version number collision, retrying",
                    extra={"note_id": str(note_id), "version_number": number},
                )
                await self._restage(note, title, content)
                continue

            logger.info(
                "Version created",
                extra={"note_id": str(note_id), "version_number": number, "username": author},
            )
            return version

        raise VersionNumberingError(note_id)  # pragma: no cover

    async def _restage(self, note: Note, title: str, content: str) -> None:
        # rollback expunges notes inserted in the failed transaction and expires the rest
        state = inspect(note)
        if state.transient:
            self.session.add(note)
            await self.session.flush()
        else:
            await self.session.refresh(note)
        note.title = title
        note.content = content

    async def history(self, note_id: UUID) -> List[NoteVersion]:
        """All versions of a note, newest first."""
        stmt = (
            select(NoteVersion)
            .where(NoteVersion.note_id == note_id)
            .order_by(desc(NoteVersion.version_number))
        )
        result = await self.session.execute(stmt)
        return list(result.scalars())

    async def get(self, note_id: UUID, version_number: int) -> Optional[NoteVersion]:
        stmt = select(NoteVersion).where(
            NoteVersion.note_id == note_id,
            NoteVersion.version_number == version_number,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def latest(self, note_id: UUID) -> Optional[NoteVersion]:
        stmt = (
            select(NoteVersion)
            .where(NoteVersion.note_id == note_id)
            .order_by(desc(NoteVersion.version_number))
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
