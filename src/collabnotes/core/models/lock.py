# Edit lock: at most one row per note
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel, as_utc, utcnow
from .types import GUID


class NoteLock(BaseModel):
    """
    Time-bounded exclusive edit claim on a note.

    A lock whose ``expires_at`` is at or before the current time is expired
    and counts as absent, even if the row is still present.
    """

    __tablename__ = "note_locks"

    note_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("notes.id", ondelete="CASCADE"), nullable=False
    )
    locked_by: Mapped[str] = mapped_column(String(50), nullable=False)
    locked_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint("note_id", name="uq_note_locks_note_id"),
        Index("idx_note_locks_expires_at", "expires_at"),
    )

    def __repr__(self) -> str:
        return f"<NoteLock(note_id={self.note_id}, locked_by={self.locked_by}, expires_at={self.expires_at})>"

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """True once ``now`` reaches ``expires_at`` (boundary counts as expired)."""
        now = as_utc(now) if now is not None else utcnow()
        return now >= as_utc(self.expires_at)

    def is_active(self, now: Optional[datetime] = None) -> bool:
        return not self.is_expired(now)

    def is_held_by(self, username: str, now: Optional[datetime] = None) -> bool:
        return self.locked_by == username and self.is_active(now)
