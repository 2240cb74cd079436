"""Exceptions raised by the notes sync pipeline."""


class NotesSyncError(Exception):
    """Base class for fatal sync errors."""


class ProviderError(NotesSyncError):
    """The notes provider could not list or export a collection."""


class PersistenceError(NotesSyncError):
    """A batch write to the notes database failed and was rolled back."""
