from __future__ import annotations

from typing import Protocol

from PySide6.QtCore import QSettings

from notes_widget.errors import StorageError


class KeyValueStore(Protocol):
    """Opaque synchronous string store. Callers do their own JSON encoding."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryKeyValueStore:
    """
    Dict-backed store (tests, headless use).
    fail_writes / fail_reads simulate an unavailable or full store.
    """

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})
        self.fail_writes = False
        self.fail_reads = False
        self.write_count = 0

    def get(self, key: str) -> str | None:
        if self.fail_reads:
            raise StorageError(key, "store unavailable")
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise StorageError(key, "quota exceeded")
        self.data[key] = value
        self.write_count += 1

    def remove(self, key: str) -> None:
        if self.fail_writes:
            raise StorageError(key, "store unavailable")
        self.data.pop(key, None)


class QSettingsKeyValueStore:
    """Key-value store on top of QSettings (the platform's native settings location)."""

    def __init__(self, settings: QSettings):
        self._settings = settings

    @property
    def settings(self) -> QSettings:
        return self._settings

    def get(self, key: str) -> str | None:
        if not self._settings.contains(key):
            return None
        # type=str: INI backend may otherwise hand back a list for comma-separated text
        return self._settings.value(key, "", type=str)

    def set(self, key: str, value: str) -> None:
        self._settings.setValue(key, value)
        self._sync(key)

    def remove(self, key: str) -> None:
        self._settings.remove(key)
        self._sync(key)

    def _sync(self, key: str) -> None:
        self._settings.sync()
        status = self._settings.status()
        if status != QSettings.Status.NoError:
            raise StorageError(key, f"QSettings sync failed: {status}")
