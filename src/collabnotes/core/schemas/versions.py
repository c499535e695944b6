"""Version history schemas."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class NoteVersionResponse(BaseModel):
    """One immutable snapshot of a note."""

    id: uuid.UUID
    note_id: uuid.UUID
    version_number: int
    title: str
    content: str
    created_by: str
    change_description: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class VersionComparisonResponse(BaseModel):
    """Field-level comparison of two versions of the same note."""

    note_id: uuid.UUID
    version1: NoteVersionResponse
    version2: NoteVersionResponse
    title_changed: bool
    content_changed: bool
    summary: str = Field(description="e.g. 'Title changed; Content changed'")
