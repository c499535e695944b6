"""
Service interfaces for the CollabNotes editing layer.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from ..schemas.common import HealthCheckResponse
from ..schemas.editing import LockStatusResponse
from ..schemas.notes import NoteCreate, NoteResponse, PermissionUpdate
from ..schemas.versions import NoteVersionResponse, VersionComparisonResponse


class INoteService(ABC):
    """Note lifecycle: creation, access and sharing settings."""

    @abstractmethod
    async def create_note(self, username: str, request: NoteCreate) -> NoteResponse:
        """Create a note owned by the caller, with version 1."""
        pass

    @abstractmethod
    async def get_note(self, note_id: UUID, username: str) -> NoteResponse:
        pass

    @abstractmethod
    async def update_permissions(
        self, note_id: UUID, username: str, request: PermissionUpdate
    ) -> NoteResponse:
        """Change visibility and grants. Owner only."""
        pass

    @abstractmethod
    async def delete_note(self, note_id: UUID, username: str) -> None:
        pass

    @abstractmethod
    async def leave_share(self, note_id: UUID, username: str) -> None:
        """Remove the caller from a note's grant sets."""
        pass


class IEditingService(ABC):
    """Edit sessions: lock, save, restore, cancel."""

    @abstractmethod
    async def begin_edit(self, note_id: UUID, username: str) -> LockStatusResponse:
        pass

    @abstractmethod
    async def save(
        self,
        note_id: UUID,
        username: str,
        title: str,
        content: str,
        change_description: Optional[str] = None,
    ) -> NoteResponse:
        pass

    @abstractmethod
    async def restore(self, note_id: UUID, username: str, version_number: int) -> NoteResponse:
        pass

    @abstractmethod
    async def cancel_edit(self, note_id: UUID, username: str) -> bool:
        pass

    @abstractmethod
    async def lock_status_for(self, note_id: UUID, username: str) -> LockStatusResponse:
        pass

    @abstractmethod
    async def extend_lock(self, note_id: UUID, username: str) -> LockStatusResponse:
        pass


class IVersionService(ABC):
    """Read-only access to a note's history."""

    @abstractmethod
    async def history(self, note_id: UUID, username: str) -> List[NoteVersionResponse]:
        pass

    @abstractmethod
    async def get_version(
        self, note_id: UUID, username: str, version_number: int
    ) -> NoteVersionResponse:
        pass

    @abstractmethod
    async def compare(
        self, note_id: UUID, username: str, version1: int, version2: int
    ) -> VersionComparisonResponse:
        pass


class IHealthService(ABC):
    """Health check service."""

    @abstractmethod
    async def get_health_status(self) -> HealthCheckResponse:
        pass

    @abstractmethod
    async def check_database_health(self) -> dict:
        pass

    @abstractmethod
    async def check_redis_health(self) -> dict:
        pass
