"""
Note schemas.

API contracts for creating notes, saving edits and managing who may see
or change a note.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models.note import NoteVisibility


def _clean_usernames(v: List[str]) -> List[str]:
    cleaned = [u.strip() for u in v if u and u.strip()]
    for username in cleaned:
        if len(username) > 50:
            raise ValueError("Usernames must be at most 50 characters")
    return sorted(set(cleaned))


class NoteCreate(BaseModel):
    """Note creation request schema."""

    title: str = Field(min_length=1, max_length=200, description="Note title")
    content: str = Field(default="", description="Note content")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        if len(v.strip()) == 0:
            raise ValueError("Title cannot be empty")
        return v

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Meeting Notes - Q4 Planning",
                "content": "## Agenda\n\n1. Review Q3 performance\n2. Set Q4 objectives",
            }
        }
    )


class NoteSaveRequest(BaseModel):
    """Body for saving an edit. Caller must hold the note's edit lock."""

    title: str = Field(min_length=1, max_length=200, description="New title")
    content: str = Field(description="New content")
    change_description: Optional[str] = Field(
        default=None, max_length=500, description="Optional note stored with the version"
    )

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        if len(v.strip()) == 0:
            raise ValueError("Title cannot be empty")
        return v


class PermissionUpdate(BaseModel):
    """Owner request to change visibility and grant sets."""

    visibility: NoteVisibility = Field(description="private, shared_read or shared_write")
    read_grants: List[str] = Field(default_factory=list, max_length=100)
    write_grants: List[str] = Field(default_factory=list, max_length=100)

    @field_validator("read_grants", "write_grants")
    @classmethod
    def validate_grants(cls, v):
        return _clean_usernames(v)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "visibility": "shared_write",
                "read_grants": ["carol"],
                "write_grants": ["bob"],
            }
        }
    )


class NoteResponse(BaseModel):
    """Note as seen by a particular caller."""

    id: uuid.UUID = Field(description="Note unique identifier")
    title: str
    content: str
    owner_username: str
    visibility: NoteVisibility
    read_grants: List[str] = Field(default_factory=list)
    write_grants: List[str] = Field(default_factory=list)

    is_owner: bool = Field(description="Whether the caller owns this note")
    can_edit: bool = Field(description="Whether the caller has write permission")
    version_number: int = Field(description="Number of the latest version")

    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
