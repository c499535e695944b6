"""Domain exceptions for the editing layer.

Four families reach the caller: NotFound, Forbidden, Conflict and Invalid,
plus Internal for broken invariants. Each family carries the HTTP status the
API layer answers with, so services never raise ``HTTPException`` directly.
"""
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID


class CollabNotesError(Exception):
    """Base exception for all domain errors.

    Attributes:
        message: Human-readable error message
        details: Additional machine-readable context
    """

    status_code: int = 500
    error_type: str = "InternalError"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the ``ErrorResponse`` payload shape."""
        return {
            "error": self.error_type,
            "message": self.message,
            "details": {k: _jsonable(v) for k, v in self.details.items()} or None,
        }


def _jsonable(value: Any) -> Any:
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return value


# --- NotFound -------------------------------------------------------------


class NotFoundError(CollabNotesError):
    status_code = 404
    error_type = "NotFound"


class NoteNotFoundError(NotFoundError):
    """Raised when a note does not exist."""

    def __init__(self, note_id: UUID):
        super().__init__("Note not found", details={"note_id": note_id})
        self.note_id = note_id


class VersionNotFoundError(NotFoundError):
    """Raised when a note has no version with the requested number."""

    def __init__(self, note_id: UUID, version_number: int):
        super().__init__(
            f"Version {version_number} not found",
            details={"note_id": note_id, "version_number": version_number},
        )
        self.note_id = note_id
        self.version_number = version_number


# --- Forbidden ------------------------------------------------------------


class ForbiddenError(CollabNotesError):
    status_code = 403
    error_type = "Forbidden"


class PermissionDeniedError(ForbiddenError):
    """Raised when a permission check fails."""

    def __init__(self, note_id: UUID, username: str, action: str):
        super().__init__(
            f"You do not have {action} access to this note",
            details={"note_id": note_id, "username": username, "action": action},
        )
        self.action = action


class LockNotHeldError(ForbiddenError):
    """Raised when a user tries to release or extend a lock someone else holds."""

    def __init__(self, note_id: UUID, username: str, holder: Optional[str] = None):
        super().__init__(
            "You do not hold the edit lock on this note",
            details={"note_id": note_id, "username": username, "locked_by": holder},
        )
        self.holder = holder


# --- Conflict -------------------------------------------------------------


class ConflictError(CollabNotesError):
    status_code = 409
    error_type = "Conflict"


class LockConflictError(ConflictError):
    """Raised when another user holds an active lock on the note."""

    def __init__(self, note_id: UUID, holder: Optional[str], expires_at: Optional[datetime] = None):
        super().__init__(
            f"Note is being edited by {holder}" if holder else "Note is being edited by another user",
            details={"note_id": note_id, "locked_by": holder, "expires_at": expires_at},
        )
        self.note_id = note_id
        self.holder = holder
        self.expires_at = expires_at


class LockRequiredError(ConflictError):
    """Raised when saving without holding the note's edit lock."""

    def __init__(self, note_id: UUID):
        super().__init__(
            "Note must be locked for editing before saving", details={"note_id": note_id}
        )


# --- Invalid --------------------------------------------------------------


class InvalidInputError(CollabNotesError):
    status_code = 400
    error_type = "Invalid"


class InvalidVersionNumberError(InvalidInputError):
    def __init__(self, version_number: Any):
        super().__init__(
            "Version number must be a positive integer",
            details={"version_number": version_number},
        )


# --- Internal -------------------------------------------------------------


class VersionNumberingError(CollabNotesError):
    """Raised when a version number could not be allocated after one retry."""

    def __init__(self, note_id: UUID):
        super().__init__(
            "Could not allocate a version number for this note", details={"note_id": note_id}
        )
