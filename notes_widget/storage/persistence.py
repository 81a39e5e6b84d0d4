from __future__ import annotations

import json
import logging
from typing import Iterable, Literal

from notes_widget.core.models import Note, utc_now
from notes_widget.errors import MalformedDataError
from notes_widget.settings import APP_NAME, NOTES_KEY, THEME_KEY
from notes_widget.storage.kv import KeyValueStore

Theme = Literal["light", "dark"]

log = logging.getLogger(APP_NAME)


class NotesPersistence:
    """
    Сериализация всей коллекции заметок в key-value store (одним JSON-массивом).

    Ошибки хранилища не пробрасываются наружу: in-memory коллекция остаётся
    источником истины до следующего успешного save().
    """

    def __init__(self, store: KeyValueStore, *, key: str = NOTES_KEY):
        self._store = store
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def save(self, notes: Iterable[Note]) -> bool:
        """Returns True if the collection was written."""
        try:
            payload = json.dumps([n.to_record() for n in notes], ensure_ascii=False)
            self._store.set(self._key, payload)
        except Exception:
            log.exception("Failed to save notes (key=%s)", self._key)
            return False
        return True

    def load(self) -> list[Note]:
        """
        Never raises: missing key -> [], corrupt data -> [] (logged).
        Records without an id are skipped, duplicate ids keep the first occurrence.
        """
        try:
            raw = self._store.get(self._key)
        except Exception:
            log.exception("Failed to read notes (key=%s)", self._key)
            return []
        if raw is None:
            return []

        try:
            records = json.loads(raw)
            if not isinstance(records, list):
                raise MalformedDataError(f"expected a JSON array, got {type(records).__name__}")
        except (ValueError, MalformedDataError):
            log.exception("Stored notes are corrupt, starting empty (key=%s)", self._key)
            return []

        notes: list[Note] = []
        seen: set[str] = set()
        now = utc_now()
        for i, record in enumerate(records):
            try:
                note = Note.from_record(record, now=now)
            except MalformedDataError as e:
                log.warning("Skipping malformed note record #%d: %s", i, e)
                continue
            if note.id in seen:
                log.warning("Skipping duplicate note id: %s", note.id)
                continue
            seen.add(note.id)
            notes.append(note)

        log.debug("Loaded %d notes (key=%s)", len(notes), self._key)
        return notes


def normalize_theme(name: str | None) -> Theme | None:
    name = (name or "").strip().lower()
    if name == "light":
        return "light"
    if name == "dark":
        return "dark"
    return None


class ThemePreference:
    """
    Theme key: "light" | "dark", or absent (follow the system preference).
    """

    def __init__(self, store: KeyValueStore, *, key: str = THEME_KEY):
        self._store = store
        self._key = key

    def load(self) -> Theme | None:
        try:
            return normalize_theme(self._store.get(self._key))
        except Exception:
            log.exception("Failed to read theme preference")
            return None

    def save(self, theme: str) -> bool:
        value = normalize_theme(theme)
        if value is None:
            raise ValueError(f"unknown theme: {theme!r}")
        try:
            self._store.set(self._key, value)
        except Exception:
            log.exception("Failed to save theme preference: %s", value)
            return False
        return True

    def clear(self) -> bool:
        try:
            self._store.remove(self._key)
        except Exception:
            log.exception("Failed to clear theme preference")
            return False
        return True

    def resolve(self, *, system_prefers_dark: bool) -> Theme:
        saved = self.load()
        if saved is not None:
            return saved
        return "dark" if system_prefers_dark else "light"

    def toggle(self, current: str) -> Theme:
        new_theme: Theme = "light" if normalize_theme(current) == "dark" else "dark"
        self.save(new_theme)
        return new_theme
