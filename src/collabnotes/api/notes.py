"""Notes API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.schemas.common import SuccessResponse
from ..core.schemas.notes import NoteCreate, NoteResponse, PermissionUpdate
from ..core.services import NoteService
from ..database import get_db_session
from ..middleware.auth import get_current_username

router = APIRouter(prefix="/notes", tags=["notes"])


@router.post("/", response_model=NoteResponse, status_code=201)
async def create_note(
    request: NoteCreate,
    current_username: str = Depends(get_current_username),
    session: AsyncSession = Depends(get_db_session),
):
    """Create a new private note (version 1)."""
    note_service = NoteService(session)
    return await note_service.create_note(current_username, request)


@router.get("/{note_id}", response_model=NoteResponse)
async def get_note(
    note_id: UUID,
    current_username: str = Depends(get_current_username),
    session: AsyncSession = Depends(get_db_session),
):
    """Get a specific note."""
    note_service = NoteService(session)
    return await note_service.get_note(note_id, current_username)


@router.delete("/{note_id}", status_code=204)
async def delete_note(
    note_id: UUID,
    current_username: str = Depends(get_current_username),
    session: AsyncSession = Depends(get_db_session),
):
    """Delete a note with its versions and lock. Owner only."""
    note_service = NoteService(session)
    await note_service.delete_note(note_id, current_username)


@router.put("/{note_id}/permissions", response_model=NoteResponse)
async def update_permissions(
    note_id: UUID,
    request: PermissionUpdate,
    current_username: str = Depends(get_current_username),
    session: AsyncSession = Depends(get_db_session),
):
    """Set visibility and grant sets. Owner only."""
    note_service = NoteService(session)
    return await note_service.update_permissions(note_id, current_username, request)


@router.delete("/{note_id}/sharing", response_model=SuccessResponse)
async def leave_share(
    note_id: UUID,
    current_username: str = Depends(get_current_username),
    session: AsyncSession = Depends(get_db_session),
):
    """Remove yourself from a note someone shared with you."""
    note_service = NoteService(session)
    await note_service.leave_share(note_id, current_username)
    return SuccessResponse(message="Removed from shared note", data={"note_id": str(note_id)})
