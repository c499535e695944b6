"""Note repository for database operations."""

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.note import Note


class NoteRepository:
    """Repository for note database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, note_data: dict) -> Note:
        """Stage a new note and flush it so it gets an id. Does not commit."""
        note = Note(**note_data)
        self.session.add(note)
        await self.session.flush()
        return note

    async def get_by_id(self, note_id: UUID) -> Optional[Note]:
        """Get note by ID, reloading any copy already in the session."""
        stmt = select(Note).where(Note.id == note_id).execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def save(self, note: Note) -> Note:
        """Commit pending changes on a note (grants, visibility)."""
        await self.session.commit()
        return note

    async def delete(self, note: Note) -> None:
        """Delete a note; its lock and versions go with it (ON DELETE CASCADE)."""
        await self.session.delete(note)
        await self.session.commit()
