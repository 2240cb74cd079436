"""Unit tests for change detection."""

from unittest.mock import Mock

import pytest

from shared.db_operations import DatabaseOperations
from shared.models import Note, NoteMetadata
from services.sync_service.change_detector import compute_stale_ids


@pytest.fixture
def db_ops():
    db = DatabaseOperations(database_url="sqlite:///:memory:")
    db.create_tables()
    db.upsert_notes([
        Note("unchanged", "A", "2024-01-01T00:00:00.000Z", "2024-01-02T00:00:00.000Z", "", "Blog"),
        Note("changed", "B", "2024-01-01T00:00:00.000Z", "2024-01-02T00:00:00.000Z", "", "Blog"),
    ])
    yield db
    db.close()


def test_new_and_changed_notes_are_stale(db_ops):
    """Test that unseen ids and differing timestamps are reported."""
    remote = [
        NoteMetadata("unchanged", "2024-01-02T00:00:00.000Z"),
        NoteMetadata("changed", "2024-01-05T00:00:00.000Z"),
        NoteMetadata("new", "2024-01-03T00:00:00.000Z"),
    ]

    assert compute_stale_ids(remote, db_ops) == {"changed", "new"}


def test_precision_difference_counts_as_stale(db_ops):
    """Test that timestamps are compared as exact strings."""
    remote = [NoteMetadata("unchanged", "2024-01-02T00:00:00Z")]

    assert compute_stale_ids(remote, db_ops) == {"unchanged"}


def test_older_remote_timestamp_counts_as_stale(db_ops):
    """Test that any difference is stale, not only newer remote copies."""
    remote = [NoteMetadata("changed", "2023-12-31T00:00:00.000Z")]

    assert compute_stale_ids(remote, db_ops) == {"changed"}


def test_nothing_changed(db_ops):
    """Test that matching timestamps produce an empty set."""
    remote = [
        NoteMetadata("unchanged", "2024-01-02T00:00:00.000Z"),
        NoteMetadata("changed", "2024-01-02T00:00:00.000Z"),
    ]

    assert compute_stale_ids(remote, db_ops) == set()


def test_empty_listing_is_empty_set():
    """Test that an empty remote listing never touches the store."""
    store = Mock()

    assert compute_stale_ids([], store) == set()
    store.get_note_modified_at.assert_not_called()


def test_store_is_only_read(db_ops):
    """Test that computing the stale set does not modify the store."""
    before = db_ops.list_notes()

    compute_stale_ids([NoteMetadata("new", "2024-01-03T00:00:00.000Z")], db_ops)

    assert db_ops.list_notes() == before
