from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QSettings

from notes_widget.services.note_store import NoteStore
from notes_widget.services.scheduler import QtScheduler, Scheduler
from notes_widget.settings import APP_NAME
from notes_widget.storage.kv import KeyValueStore, QSettingsKeyValueStore
from notes_widget.storage.persistence import NotesPersistence, Theme, ThemePreference

log = logging.getLogger(APP_NAME)


class NotesSession:
    """
    Everything the UI shell holds for one run of the widget:
    key-value store, loaded NoteStore, theme preference.
    close() flushes pending edits, so call it (or use `with`) on teardown.
    """

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        *,
        scheduler: Optional[Scheduler] = None,
        settings: Optional[QSettings] = None,
        **store_kwargs,
    ) -> None:
        if store is None:
            # QSettings сам выберет корректное место под конкретную ОС.
            store = QSettingsKeyValueStore(settings or QSettings(APP_NAME, APP_NAME))
        self.kv = store
        self.persistence = NotesPersistence(store)
        self.theme = ThemePreference(store)
        self.notes = NoteStore.from_persistence(
            self.persistence,
            scheduler=scheduler or QtScheduler(),
            **store_kwargs,
        )
        self._closed = False
        log.info("Notes session opened: %d notes", len(self.notes.notes))

    def resolve_theme(self, *, system_prefers_dark: bool) -> Theme:
        return self.theme.resolve(system_prefers_dark=system_prefers_dark)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self.notes.close()
        except Exception:
            log.exception("Failed to flush notes on close")
        log.info("Notes session closed")

    def __enter__(self) -> "NotesSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
