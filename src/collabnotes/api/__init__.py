"""API routers for CollabNotes."""

from .editing import router as editing_router
from .health import router as health_router
from .notes import router as notes_router
from .versions import router as versions_router

__all__ = ["notes_router", "editing_router", "versions_router", "health_router"]
