"""Database operations for the notes to static site application."""

import logging
from typing import Iterable, List, Optional

from sqlalchemy import create_engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from shared.config import get_database_url
from shared.db_models import Base, NoteRecord
from shared.errors import PersistenceError
from shared.models import AttachmentManifestEntry, Note

logger = logging.getLogger(__name__)


class DatabaseOperations:
    """Handles all database operations for the notes store.

    The instance owns its engine; callers construct it, pass it to the
    components that need it and call ``close`` when done.
    """

    def __init__(self, database_url: Optional[str] = None):
        """Initialize database connection."""
        self.database_url = database_url or get_database_url()
        self.engine = create_engine(self.database_url, pool_pre_ping=True)
        self.SessionLocal = sessionmaker(autoflush=False, bind=self.engine)

    def create_tables(self):
        """Create all tables in the database."""
        Base.metadata.create_all(bind=self.engine)

    def get_session(self) -> Session:
        """Get a new database session."""
        return self.SessionLocal()

    def close(self):
        """Release pooled connections."""
        self.engine.dispose()

    def __enter__(self) -> "DatabaseOperations":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # Note Operations

    def get_note(self, note_id: str) -> Optional[Note]:
        """
        Get a note by id.

        Args:
            note_id: The provider's note id

        Returns:
            Note or None if not found
        """
        with self.get_session() as session:
            record = session.get(NoteRecord, note_id)
            if record is None:
                return None
            return _to_note(record)

    def get_note_modified_at(self, note_id: str) -> Optional[str]:
        """
        Get only the stored modification timestamp of a note.

        Args:
            note_id: The provider's note id

        Returns:
            The stored ISO timestamp or None if the note is unknown
        """
        with self.get_session() as session:
            stmt = select(NoteRecord.modified_at).where(NoteRecord.id == note_id)
            return session.execute(stmt).scalar_one_or_none()

    def list_notes(self, collection: Optional[str] = None) -> List[Note]:
        """
        List stored notes, most recently modified first.

        Args:
            collection: Optional folder name to filter by

        Returns:
            List of notes
        """
        with self.get_session() as session:
            stmt = select(NoteRecord)
            if collection:
                stmt = stmt.where(NoteRecord.collection == collection)
            stmt = stmt.order_by(NoteRecord.modified_at.desc())
            result = session.execute(stmt)
            return [_to_note(record) for record in result.scalars().all()]

    def upsert_notes(self, notes: Iterable[Note]) -> int:
        """
        Insert or fully replace notes in a single transaction.

        Either every note is written or none is: any failure rolls back the
        whole batch.

        Args:
            notes: Notes to write

        Returns:
            Number of notes committed

        Raises:
            PersistenceError: If the transaction failed
        """
        notes = list(notes)
        if not notes:
            return 0

        session = self.get_session()
        try:
            with session.begin():
                for note in notes:
                    session.merge(NoteRecord(
                        id=note.id,
                        title=note.title,
                        created_at=note.created_at,
                        modified_at=note.modified_at,
                        body=note.body,
                        collection=note.collection,
                        attachments=[entry.to_dict() for entry in note.attachments],
                    ))
        except SQLAlchemyError as e:
            logger.error(f"Failed to save {len(notes)} notes, transaction rolled back: {e}")
            raise PersistenceError(f"Failed to save notes to database: {e}") from e
        finally:
            session.close()

        logger.info(f"Saved {len(notes)} notes to database")
        return len(notes)


def _to_note(record: NoteRecord) -> Note:
    return Note(
        id=record.id,
        title=record.title,
        created_at=record.created_at,
        modified_at=record.modified_at,
        body=record.body,
        collection=record.collection,
        attachments=[
            AttachmentManifestEntry.from_dict(entry)
            for entry in (record.attachments or [])
        ],
    )
