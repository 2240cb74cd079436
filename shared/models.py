"""Shared data models for the notes to static site application."""

from dataclasses import asdict, dataclass, field
from typing import List, Optional


@dataclass
class AttachmentManifestEntry:
    """An image extracted from a note body into its own file."""
    sequence_number: int
    filename: str
    relative_path: str
    media_type: str

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "AttachmentManifestEntry":
        return cls(
            sequence_number=int(data["sequence_number"]),
            filename=data["filename"],
            relative_path=data["relative_path"],
            media_type=data["media_type"],
        )


@dataclass
class NoteMetadata:
    """Lightweight listing entry used for change detection."""
    id: str
    modified_at: str


@dataclass
class Note:
    """Represents a note exported from the notes app.

    Timestamps are kept as the ISO-8601 strings the provider emits so that
    change detection can compare them exactly.
    """
    id: str
    title: str
    created_at: str
    modified_at: str
    body: str
    collection: str = ""
    attachments: List[AttachmentManifestEntry] = field(default_factory=list)


@dataclass
class NotesFolder:
    """A folder of the notes app, usable as a collection name."""
    name: str
    id: Optional[str] = None
    note_count: int = 0


@dataclass
class CollectionExport:
    """Full export of one notes folder."""
    name: str
    notes: List[Note]


@dataclass
class ExtractionResult:
    """Body with embedded images replaced by file references."""
    body: str
    attachments: List[AttachmentManifestEntry]
