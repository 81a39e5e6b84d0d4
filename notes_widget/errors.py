from __future__ import annotations


class NotesError(Exception):
    """Base class for notes-widget errors."""


class StorageError(NotesError):
    """The key-value store failed to read or write a value."""

    def __init__(self, key: str, message: str):
        super().__init__(f"{message} (key={key!r})")
        self.key = key


class MalformedDataError(NotesError):
    """Stored data does not have the expected shape."""
