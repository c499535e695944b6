"""Version history endpoints."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.schemas.versions import NoteVersionResponse, VersionComparisonResponse
from ..core.services import VersionService
from ..database import get_db_session
from ..middleware.auth import get_current_username

router = APIRouter(prefix="/notes", tags=["versions"])


@router.get("/{note_id}/versions", response_model=List[NoteVersionResponse])
async def version_history(
    note_id: UUID,
    current_username: str = Depends(get_current_username),
    session: AsyncSession = Depends(get_db_session),
):
    """All versions, newest first."""
    version_service = VersionService(session)
    return await version_service.history(note_id, current_username)


@router.get("/{note_id}/versions/{version_number}", response_model=NoteVersionResponse)
async def get_version(
    note_id: UUID,
    version_number: int,
    current_username: str = Depends(get_current_username),
    session: AsyncSession = Depends(get_db_session),
):
    version_service = VersionService(session)
    return await version_service.get_version(note_id, current_username, version_number)


@router.get("/{note_id}/compare/{version1}/{version2}", response_model=VersionComparisonResponse)
async def compare_versions(
    note_id: UUID,
    version1: int,
    version2: int,
    current_username: str = Depends(get_current_username),
    session: AsyncSession = Depends(get_db_session),
):
    """Report whether title and content differ between two versions."""
    version_service = VersionService(session)
    return await version_service.compare(note_id, current_username, version1, version2)
