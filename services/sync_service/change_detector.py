"""Detection of notes whose remote copy differs from the stored one."""

from typing import Iterable, Set

from shared.db_operations import DatabaseOperations
from shared.models import NoteMetadata


def compute_stale_ids(
    remote_metadata: Iterable[NoteMetadata],
    db_ops: DatabaseOperations
) -> Set[str]:
    """
    Find the notes that are new or changed upstream.

    A note is stale when it is not stored yet or when its stored
    ``modified_at`` is not exactly equal to the remote one.

    Args:
        remote_metadata: Listing fetched from the provider
        db_ops: Notes store, only read

    Returns:
        Set of stale note ids
    """
    stale_ids = set()
    for entry in remote_metadata:
        stored_modified_at = db_ops.get_note_modified_at(entry.id)
        if stored_modified_at is None or stored_modified_at != entry.modified_at:
            stale_ids.add(entry.id)
    return stale_ids
