# Immutable snapshots of a note's title and content
import uuid
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel
from .types import GUID


@dataclass(frozen=True)
class VersionDiff:
    """Which fields differ between two versions."""

    title_changed: bool
    content_changed: bool

    @property
    def has_changes(self) -> bool:
        return self.title_changed or self.content_changed

    @property
    def summary(self) -> str:
        parts = []
        if self.title_changed:
            parts.append("Title changed")
        if self.content_changed:
            parts.append("Content changed")
        return "; ".join(parts) if parts else "No changes detected"


class NoteVersion(BaseModel):
    """One numbered snapshot. Rows are written once and never updated."""

    __tablename__ = "note_versions"

    note_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("notes.id", ondelete="CASCADE"), nullable=False
    )
    version_number: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_by: Mapped[str] = mapped_column(String(50), nullable=False)
    change_description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    __table_args__ = (
        UniqueConstraint("note_id", "version_number", name="uq_note_versions_note_number"),
        Index("idx_note_versions_note_id", "note_id"),
        CheckConstraint("version_number >= 1", name="ck_note_versions_positive"),
    )

    def __repr__(self) -> str:
        return f"<NoteVersion(note_id={self.note_id}, version_number={self.version_number})>"

    def diff(self, other: "NoteVersion") -> VersionDiff:
        return VersionDiff(
            title_changed=self.title != other.title,
            content_changed=self.content != other.content,
        )
