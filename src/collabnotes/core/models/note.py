# Note model with owner, visibility and grant sets
import enum
from typing import Iterable, List

from sqlalchemy import CheckConstraint, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel
from .types import UsernameListType, normalize_usernames


class NoteVisibility(str, enum.Enum):
    """How widely the owner has opened a note."""

    PRIVATE = "private"
    SHARED_READ = "shared_read"
    SHARED_WRITE = "shared_write"


class Note(BaseModel):
    """Editable note. Title and content always mirror the latest version."""

    __tablename__ = "notes"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    owner_username: Mapped[str] = mapped_column(String(50), nullable=False)

    visibility: Mapped[str] = mapped_column(
        String(20), nullable=False, default=NoteVisibility.PRIVATE.value
    )

    # grant sets are replaced wholesale, never mutated in place
    read_grants: Mapped[List[str]] = mapped_column(UsernameListType, nullable=False, default=list)
    write_grants: Mapped[List[str]] = mapped_column(UsernameListType, nullable=False, default=list)

    __table_args__ = (
        Index("idx_notes_owner_username", "owner_username"),
        CheckConstraint("length(title) <= 200", name="ck_notes_title_len"),
        CheckConstraint(
            "visibility IN ('private', 'shared_read', 'shared_write')",
            name="ck_notes_visibility",
        ),
    )

    def __repr__(self) -> str:
        truncated = self.title if len(self.title) <= 30 else (self.title[:30] + "...")
        return f"<Note(title='{truncated}', owner={self.owner_username})>"

    @property
    def visibility_enum(self) -> NoteVisibility:
        return NoteVisibility(self.visibility)

    def is_owned_by(self, username: str) -> bool:
        return self.owner_username == username

    def set_grants(self, read: Iterable[str] = (), write: Iterable[str] = ()) -> None:
        """Replace both grant sets; the owner never appears in either."""
        self.read_grants = [u for u in normalize_usernames(read) if u != self.owner_username]
        self.write_grants = [u for u in normalize_usernames(write) if u != self.owner_username]

    def revoke(self, username: str) -> None:
        """Remove a user from both grant sets."""
        self.read_grants = [u for u in (self.read_grants or []) if u != username]
        self.write_grants = [u for u in (self.write_grants or []) if u != username]
