"""
Pydantic schemas for validating and documenting API requests and responses.
"""

from .common import ErrorResponse, HealthCheckResponse, SuccessResponse
from .editing import LockStatusResponse, RestoreVersionRequest
from .notes import NoteCreate, NoteResponse, NoteSaveRequest, PermissionUpdate
from .versions import NoteVersionResponse, VersionComparisonResponse

__all__ = [
    # Note schemas
    "NoteCreate",
    "NoteSaveRequest",
    "NoteResponse",
    "PermissionUpdate",
    # Editing schemas
    "LockStatusResponse",
    "RestoreVersionRequest",
    # Version schemas
    "NoteVersionResponse",
    "VersionComparisonResponse",
    # Common schemas
    "ErrorResponse",
    "SuccessResponse",
    "HealthCheckResponse",
]
