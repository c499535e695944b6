"""
Unit tests for base model functionality.
"""

import uuid
from datetime import datetime, timezone

from src.collabnotes.core.models import BaseModel, Note, as_utc


class TestBaseModel:
    """Test BaseModel functionality."""

    def test_base_model_abstract(self):
        assert BaseModel.__abstract__ is True

    def test_repr_method(self):
        note = Note(title="T1", owner_username="alice")
        note.id = uuid.uuid4()
        assert repr(note) == f"<Note(id={note.id})>"

    def test_equality_by_primary_key(self):
        shared_id = uuid.uuid4()
        a = Note(title="A", owner_username="alice")
        b = Note(title="B", owner_username="bob")
        a.id = b.id = shared_id

        assert a == b
        assert hash(a) == hash(b)

        b.id = uuid.uuid4()
        assert a != b

    def test_unsaved_rows_compare_by_identity(self):
        a = Note(title="A", owner_username="alice")
        b = Note(title="A", owner_username="alice")
        assert a == a
        assert a != b

    def test_to_dict_serializes_ids_and_times(self):
        note = Note(title="T1", content="body", owner_username="alice", visibility="private")
        note.id = uuid.uuid4()
        note.created_at = datetime(2025, 1, 1, 12, 0)  # naive, as SQLite returns it
        note.updated_at = datetime(2025, 1, 2, 12, 0, tzinfo=timezone.utc)

        data = note.to_dict()

        assert data["id"] == str(note.id)
        assert data["created_at"] == "2025-01-01T12:00:00+00:00"
        assert data["updated_at"] == "2025-01-02T12:00:00+00:00"
        assert data["title"] == "T1"


def test_as_utc():
    naive = datetime(2025, 1, 1, 12, 0)
    assert as_utc(naive).tzinfo is timezone.utc
    assert as_utc(None) is None
    aware = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)
    assert as_utc(aware) is aware
