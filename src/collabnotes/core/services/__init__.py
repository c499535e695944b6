"""Business logic layer."""

from .editing_service import EditingService
from .health_service import HealthService
from .lock_sweeper import LockSweeper
from .note_service import NoteService
from .version_service import VersionService

__all__ = [
    "NoteService",
    "EditingService",
    "VersionService",
    "HealthService",
    "LockSweeper",
]
