"""Unit tests for VersionService read operations."""

import pytest

from src.collabnotes.core.exceptions import (
    InvalidVersionNumberError,
    PermissionDeniedError,
    VersionNotFoundError,
)
from src.collabnotes.core.services import EditingService, VersionService


@pytest.fixture
def versions(test_session):
    return VersionService(test_session)


@pytest.fixture
async def edited_note(make_note, test_session, test_settings):
    """Three versions: T1/a, T2/a, T2/b."""
    note = await make_note(title="T1", content="a", visibility="shared_read", read_grants=["carol"])
    editing = EditingService(test_session, test_settings)
    for title, content in (("T2", "a"), ("T2", "b")):
        await editing.begin_edit(note.id, "alice")
        await editing.save(note.id, "alice", title, content)
    return note


async def test_history_order(versions, edited_note):
    history = await versions.history(edited_note.id, "carol")
    assert [v.version_number for v in history] == [3, 2, 1]


async def test_get_version(versions, edited_note):
    v2 = await versions.get_version(edited_note.id, "carol", 2)
    assert (v2.title, v2.content) == ("T2", "a")


async def test_get_missing_version(versions, edited_note):
    with pytest.raises(VersionNotFoundError) as exc_info:
        await versions.get_version(edited_note.id, "alice", 9)
    assert exc_info.value.status_code == 404


async def test_get_version_rejects_zero(versions, edited_note):
    with pytest.raises(InvalidVersionNumberError):
        await versions.get_version(edited_note.id, "alice", 0)


async def test_compare_reports_changed_fields(versions, edited_note):
    result = await versions.compare(edited_note.id, "carol", 1, 2)
    assert result.title_changed is True
    assert result.content_changed is False
    assert result.summary == "Title changed"

    result = await versions.compare(edited_note.id, "carol", 1, 3)
    assert result.summary == "Title changed; Content changed"


async def test_compare_is_symmetric(versions, edited_note):
    forward = await versions.compare(edited_note.id, "carol", 1, 3)
    backward = await versions.compare(edited_note.id, "carol", 3, 1)

    assert (forward.title_changed, forward.content_changed) == (
        backward.title_changed,
        backward.content_changed,
    )
    assert forward.version1.version_number == 1
    assert backward.version1.version_number == 3


async def test_compare_with_itself(versions, edited_note):
    result = await versions.compare(edited_note.id, "alice", 2, 2)
    assert result.title_changed is False
    assert result.content_changed is False
    assert result.summary == "No changes detected"


async def test_compare_missing_version(versions, edited_note):
    with pytest.raises(VersionNotFoundError):
        await versions.compare(edited_note.id, "alice", 1, 7)


async def test_reads_require_permission(versions, edited_note):
    with pytest.raises(PermissionDeniedError):
        await versions.history(edited_note.id, "mallory")
    with pytest.raises(PermissionDeniedError):
        await versions.get_version(edited_note.id, "mallory", 1)
    with pytest.raises(PermissionDeniedError):
        await versions.compare(edited_note.id, "mallory", 1, 2)
