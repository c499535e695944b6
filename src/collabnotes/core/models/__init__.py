"""
Database models for the CollabNotes editing layer.

Models included:
    - Note: note content, owner, visibility and grant sets
    - NoteLock: time-bounded edit lock, at most one per note
    - NoteVersion: numbered immutable snapshot of a note
"""

from .base import BaseModel, as_utc, utcnow
from .lock import NoteLock
from .note import Note, NoteVisibility
from .version import NoteVersion, VersionDiff

__all__ = [
    "BaseModel",
    "Note",
    "NoteVisibility",
    "NoteLock",
    "NoteVersion",
    "VersionDiff",
    "as_utc",
    "utcnow",
]
