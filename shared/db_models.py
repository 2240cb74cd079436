"""SQLAlchemy database models for the notes to static site application."""

from sqlalchemy import JSON, Column, Index, String, Text
from sqlalchemy.orm import declarative_base


Base = declarative_base()


class NoteRecord(Base):
    """Model for notes table."""
    __tablename__ = 'notes'

    id = Column(String(255), primary_key=True)
    title = Column(Text, nullable=False)
    # ISO-8601 strings as emitted by the provider, compared verbatim
    created_at = Column(String(64), nullable=False)
    modified_at = Column(String(64), nullable=False)
    body = Column(Text, nullable=False)
    collection = Column(String(255), nullable=False)
    attachments = Column(JSON, nullable=False, default=list)

    __table_args__ = (
        Index('idx_notes_collection', 'collection'),
    )
