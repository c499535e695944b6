"""Lock status and restore schemas."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LockStatusResponse(BaseModel):
    """Lock state of a note from the caller's point of view."""

    note_id: uuid.UUID
    locked: bool = Field(description="Whether an unexpired lock exists")
    locked_by: Optional[str] = Field(default=None, description="Holder of the active lock")
    expires_at: Optional[datetime] = Field(default=None, description="When the active lock lapses")
    is_locked_by_me: bool = Field(default=False)
    can_edit: bool = Field(description="Whether the caller could take the lock right now")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "note_id": "123e4567-e89b-12d3-a456-426614174000",
                "locked": True,
                "locked_by": "alice",
                "expires_at": "2025-09-13T10:35:00Z",
                "is_locked_by_me": False,
                "can_edit": False,
            }
        }
    )


class RestoreVersionRequest(BaseModel):
    version_number: int = Field(description="Version to restore")
