"""Read/write decisions for a user on a note.

Pure functions of the note's owner, visibility and grant sets:

- the owner can always read and write
- ``private`` notes are owner-only regardless of grants
- any shared note admits readers in either grant set (write implies read)
- only ``shared_write`` admits writers, those in ``write_grants``
"""

from .exceptions import PermissionDeniedError
from .models.note import Note, NoteVisibility


def can_read(note: Note, username: str) -> bool:
    if note.is_owned_by(username):
        return True

    visibility = note.visibility_enum
    if visibility is NoteVisibility.PRIVATE:
        return False
    return username in (note.read_grants or []) or username in (note.write_grants or [])


def can_write(note: Note, username: str) -> bool:
    if note.is_owned_by(username):
        return True
    if note.visibility_enum is NoteVisibility.SHARED_WRITE:
        return username in (note.write_grants or [])
    return False


def require_read(note: Note, username: str) -> None:
    if not can_read(note, username):
        raise PermissionDeniedError(note.id, username, "read")


def require_write(note: Note, username: str) -> None:
    if not can_write(note, username):
        raise PermissionDeniedError(note.id, username, "write")
