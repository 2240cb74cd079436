"""Pydantic models for the JSON emitted by the Notes app scripts."""

from typing import List, Optional

from pydantic import BaseModel, TypeAdapter

from shared.models import CollectionExport, Note, NoteMetadata, NotesFolder


class NoteMetadataPayload(BaseModel):
    """One entry of the metadata listing."""
    id: str
    modified: str

    def to_metadata(self) -> NoteMetadata:
        return NoteMetadata(id=self.id, modified_at=self.modified)


class NotePayload(BaseModel):
    """One note of the full export."""
    name: str = ""
    id: str
    created: str
    modified: str
    body: str = ""

    def to_note(self, collection: str) -> Note:
        return Note(
            id=self.id,
            title=self.name,
            created_at=self.created,
            modified_at=self.modified,
            body=self.body,
            collection=collection,
        )


class CollectionPayload(BaseModel):
    """Full export of a folder."""
    name: str
    notes: List[NotePayload]

    def to_export(self) -> CollectionExport:
        return CollectionExport(
            name=self.name,
            notes=[note.to_note(self.name) for note in self.notes],
        )


class FolderPayload(BaseModel):
    """One folder of the folder listing."""
    name: str
    id: Optional[str] = None
    noteCount: int = 0

    def to_folder(self) -> NotesFolder:
        return NotesFolder(name=self.name, id=self.id, note_count=self.noteCount)


class FolderListPayload(BaseModel):
    """Folder listing of the Notes app."""
    folders: List[FolderPayload]


metadata_list_adapter = TypeAdapter(List[NoteMetadataPayload])
