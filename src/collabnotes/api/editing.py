"""Edit session endpoints: lock, save, restore, cancel."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import Settings, get_settings
from ..core.schemas.common import SuccessResponse
from ..core.schemas.editing import LockStatusResponse, RestoreVersionRequest
from ..core.schemas.notes import NoteResponse, NoteSaveRequest
from ..core.services import EditingService
from ..database import get_db_session
from ..middleware.auth import get_current_username

router = APIRouter(prefix="/notes", tags=["editing"])


def get_editing_service(
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> EditingService:
    return EditingService(session, settings)


@router.post("/{note_id}/lock", response_model=LockStatusResponse)
async def begin_edit(
    note_id: UUID,
    current_username: str = Depends(get_current_username),
    service: EditingService = Depends(get_editing_service),
):
    """Take the edit lock. 409 while another user holds it."""
    return await service.begin_edit(note_id, current_username)


@router.put("/{note_id}/lock", response_model=LockStatusResponse)
async def extend_lock(
    note_id: UUID,
    current_username: str = Depends(get_current_username),
    service: EditingService = Depends(get_editing_service),
):
    """Extend a lock you hold by one more TTL."""
    return await service.extend_lock(note_id, current_username)


@router.delete("/{note_id}/lock", response_model=SuccessResponse)
async def cancel_edit(
    note_id: UUID,
    current_username: str = Depends(get_current_username),
    service: EditingService = Depends(get_editing_service),
):
    """Give up the lock without saving."""
    released = await service.cancel_edit(note_id, current_username)
    return SuccessResponse(
        message="Lock released" if released else "No lock was held",
        data={"note_id": str(note_id), "released": released},
    )


@router.get("/{note_id}/lock-status", response_model=LockStatusResponse)
async def lock_status(
    note_id: UUID,
    current_username: str = Depends(get_current_username),
    service: EditingService = Depends(get_editing_service),
):
    return await service.lock_status_for(note_id, current_username)


@router.put("/{note_id}", response_model=NoteResponse)
async def save_note(
    note_id: UUID,
    request: NoteSaveRequest,
    current_username: str = Depends(get_current_username),
    service: EditingService = Depends(get_editing_service),
):
    """Save an edit as a new version. Requires holding the lock; releases it."""
    return await service.save(
        note_id,
        current_username,
        request.title,
        request.content,
        request.change_description,
    )


@router.post("/{note_id}/restore", response_model=NoteResponse)
async def restore_version(
    note_id: UUID,
    request: RestoreVersionRequest,
    current_username: str = Depends(get_current_username),
    service: EditingService = Depends(get_editing_service),
):
    """Restore an earlier version as a new version."""
    return await service.restore(note_id, current_username, request.version_number)
