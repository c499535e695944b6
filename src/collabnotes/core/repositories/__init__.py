"""Repository layer for data access."""

from .lock_repository import LockRepository, LockState
from .note_repository import NoteRepository
from .version_repository import VersionRepository

__all__ = ["NoteRepository", "LockRepository", "LockState", "VersionRepository"]
