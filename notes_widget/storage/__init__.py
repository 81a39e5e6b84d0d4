from .kv import KeyValueStore, MemoryKeyValueStore, QSettingsKeyValueStore
from .persistence import NotesPersistence, ThemePreference

__all__ = [
    "KeyValueStore",
    "MemoryKeyValueStore",
    "QSettingsKeyValueStore",
    "NotesPersistence",
    "ThemePreference",
]
