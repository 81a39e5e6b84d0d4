from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Callable, Iterable, Optional

from notes_widget.core.models import Clock, Note, generate_note_id, normalize_title, utc_now
from notes_widget.core.query import search_notes, sort_notes
from notes_widget.core.timefmt import format_time
from notes_widget.services.scheduler import DeferredTask, Scheduler
from notes_widget.settings import APP_NAME, AUTOSAVE_DEBOUNCE_MS, SAVED_STATUS_MS
from notes_widget.storage.persistence import NotesPersistence

log = logging.getLogger(APP_NAME)

StatusListener = Callable[["SaveStatus"], None]
ChangeListener = Callable[[], None]


class SaveStatus(Enum):
    IDLE = "idle"
    SAVING = "saving"
    SAVED = "saved"


class NoteStore:
    """
    Владелец in-memory коллекции заметок.

      - create / toggle_star / delete сохраняются сразу
      - edit меняет поля сразу, а commit (нормализация title + updated_at + save)
        откладывается debounce-таймером; новый edit отменяет предыдущий таймер
      - flush() выполняет отложенный commit синхронно (перед select / закрытием)
      - search / list_sorted — чистые функции над текущим состоянием

    Unknown ids are silent no-ops: an id can go stale after a delete in the same session.
    """

    def __init__(
        self,
        persistence: NotesPersistence,
        *,
        scheduler: Scheduler,
        notes: Optional[Iterable[Note]] = None,
        clock: Clock = utc_now,
        debounce_ms: int = AUTOSAVE_DEBOUNCE_MS,
        saved_status_ms: int = SAVED_STATUS_MS,
    ) -> None:
        self._persistence = persistence
        self._scheduler = scheduler
        self._clock = clock
        self._debounce_ms = int(debounce_ms)
        self._saved_status_ms = int(saved_status_ms)

        self._notes: list[Note] = list(notes or [])
        self._selected_id: str | None = None

        # ids edited since the last commit, in edit order
        self._pending_ids: dict[str, None] = {}
        self._commit_task: DeferredTask | None = None
        self._status_task: DeferredTask | None = None

        self._status = SaveStatus.IDLE
        self._last_saved_at: datetime | None = None

        self._status_listeners: list[StatusListener] = []
        self._change_listeners: list[ChangeListener] = []

    @classmethod
    def from_persistence(cls, persistence: NotesPersistence, **kwargs) -> "NoteStore":
        return cls(persistence, notes=persistence.load(), **kwargs)

    # ---- read accessors ----

    @property
    def notes(self) -> list[Note]:
        """Storage order (newest created first). A copy: mutate through the store."""
        return list(self._notes)

    def get(self, note_id: str | None) -> Note | None:
        if note_id is None:
            return None
        for note in self._notes:
            if note.id == note_id:
                return note
        return None

    @property
    def selected_id(self) -> str | None:
        return self._selected_id

    @property
    def selected_note(self) -> Note | None:
        return self.get(self._selected_id)

    @property
    def has_pending_commit(self) -> bool:
        return bool(self._pending_ids) or self._commit_task is not None

    @property
    def status(self) -> SaveStatus:
        return self._status

    @property
    def last_saved_at(self) -> datetime | None:
        return self._last_saved_at

    @property
    def status_text(self) -> str:
        if self._status is SaveStatus.SAVING:
            return "Saving..."
        if self._last_saved_at is None:
            return "Last saved: Never"
        return f"Last saved: {format_time(self._last_saved_at)}"

    # ---- listeners ----

    def on_status(self, callback: StatusListener) -> None:
        self._status_listeners.append(callback)

    def on_change(self, callback: ChangeListener) -> None:
        self._change_listeners.append(callback)

    # ---- mutations ----

    def create(self) -> str:
        now = self._clock()
        note = Note.new(generate_note_id(n.id for n in self._notes), now=now)
        self._notes.insert(0, note)
        log.info("Note created: %s", note.id)
        self._persist()
        self._notify_change()
        return note.id

    def select(self, note_id: str | None) -> Note | None:
        # flush-on-switch: never lose an edit by navigating away
        if self._selected_id is not None:
            self.flush()

        note = self.get(note_id)
        if note is None and note_id is not None:
            log.debug("Select: note not found, clearing selection (id=%s)", note_id)
        self._selected_id = note.id if note is not None else None
        return note

    def edit(self, note_id: str, *, title: str | None = None, content: str | None = None) -> bool:
        note = self.get(note_id)
        if note is None:
            log.debug("Edit ignored: note not found (id=%s)", note_id)
            return False

        if title is not None:
            note.title = title
        if content is not None:
            note.content = content

        self._pending_ids[note.id] = None
        self._schedule_commit()
        self._set_status(SaveStatus.SAVING)
        self._notify_change()
        return True

    def flush(self) -> bool:
        """Commit a pending edit now. Returns False if there was nothing to commit."""
        if not self.has_pending_commit:
            return False
        self._cancel_task(self._commit_task)
        self._commit_task = None
        self._commit()
        return True

    def toggle_star(self, note_id: str) -> bool | None:
        """Returns the new starred flag, or None if the note does not exist."""
        note = self.get(note_id)
        if note is None:
            log.debug("Toggle star ignored: note not found (id=%s)", note_id)
            return None

        note.starred = not note.starred
        log.info("Note %s: %s", "starred" if note.starred else "unstarred", note.id)
        self._persist()
        self._notify_change()
        return note.starred

    def delete(self, note_id: str) -> bool:
        for i, note in enumerate(self._notes):
            if note.id == note_id:
                break
        else:
            log.debug("Delete ignored: note not found (id=%s)", note_id)
            return False

        del self._notes[i]
        self._pending_ids.pop(note_id, None)
        if self._selected_id == note_id:
            self._selected_id = None

        log.info("Note deleted: %s", note_id)
        self._persist()
        self._notify_change()
        return True

    def close(self) -> None:
        """Session teardown: commit pending edits, stop the status timer."""
        self.flush()
        self._cancel_task(self._status_task)
        self._status_task = None

    # ---- queries ----

    def search(self, query: str | None) -> list[Note]:
        return search_notes(self._notes, query)

    def list_sorted(self, source: Optional[Iterable[Note]] = None) -> list[Note]:
        return sort_notes(self._notes if source is None else source)

    # ---- commit machinery ----

    def _schedule_commit(self) -> None:
        # at most one pending commit: cancel, then schedule
        self._cancel_task(self._commit_task)
        self._commit_task = self._scheduler.call_later(self._debounce_ms, self._on_commit_timer)

    def _on_commit_timer(self) -> None:
        self._commit_task = None
        self._commit()

    def _commit(self) -> None:
        now = self._clock()
        for note_id in self._pending_ids:
            note = self.get(note_id)
            if note is None:
                continue
            note.title = normalize_title(note.title)
            note.updated_at = max(now, note.created_at)
        committed = list(self._pending_ids)
        self._pending_ids.clear()

        if self._persist():
            log.debug("Commit saved: %s", ", ".join(committed) or "-")
            self._last_saved_at = now
            self._set_status(SaveStatus.SAVED)
            self._cancel_task(self._status_task)
            self._status_task = self._scheduler.call_later(self._saved_status_ms, self._on_status_timer)
        else:
            self._set_status(SaveStatus.IDLE)
        self._notify_change()

    def _on_status_timer(self) -> None:
        self._status_task = None
        if self._status is SaveStatus.SAVED:
            self._set_status(SaveStatus.IDLE)

    def _persist(self) -> bool:
        return self._persistence.save(self._notes)

    @staticmethod
    def _cancel_task(task: DeferredTask | None) -> None:
        if task is not None and task.active:
            task.cancel()

    # ---- notifications ----

    def _set_status(self, status: SaveStatus) -> None:
        # SAVED is re-announced: every commit carries a new "last saved" time
        if status is self._status and status is not SaveStatus.SAVED:
            return
        self._status = status
        for cb in list(self._status_listeners):
            try:
                cb(status)
            except Exception:
                log.exception("Status listener failed: %r", cb)

    def _notify_change(self) -> None:
        for cb in list(self._change_listeners):
            try:
                cb()
            except Exception:
                log.exception("Change listener failed: %r", cb)
