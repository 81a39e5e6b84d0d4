from .note_store import NoteStore, SaveStatus
from .scheduler import QtScheduler

__all__ = [
    "NoteStore",
    "SaveStatus",
    "QtScheduler",
]
