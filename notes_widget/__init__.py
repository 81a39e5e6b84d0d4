from .core.models import Note
from .services.note_store import NoteStore, SaveStatus
from .session import NotesSession
from .storage.kv import MemoryKeyValueStore, QSettingsKeyValueStore
from .storage.persistence import NotesPersistence, ThemePreference

__all__ = ["Note",
           "NoteStore",
           "SaveStatus",
           "NotesSession",
           "MemoryKeyValueStore",
           "QSettingsKeyValueStore",
           "NotesPersistence",
           "ThemePreference",
           ]
