from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol

from PySide6.QtCore import QObject, QTimer

from notes_widget.settings import APP_NAME

log = logging.getLogger(APP_NAME)


class DeferredTask(Protocol):
    """Handle of a scheduled callback."""

    @property
    def active(self) -> bool: ...

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> DeferredTask: ...


class _QtDeferredTask:
    def __init__(self, timer: QTimer):
        self._timer = timer

    @property
    def active(self) -> bool:
        try:
            return self._timer.isActive()
        except RuntimeError:
            # C++ object already deleted
            return False

    def cancel(self) -> None:
        try:
            if self._timer.isActive():
                self._timer.stop()
            self._timer.deleteLater()
        except RuntimeError:
            pass


class QtScheduler:
    """
    Single-shot QTimer per task, runs on the Qt event loop of the calling thread.
    """

    def __init__(self, parent: Optional[QObject] = None):
        self._parent = parent

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> DeferredTask:
        timer = QTimer(self._parent)
        timer.setSingleShot(True)
        timer.setInterval(max(0, int(delay_ms)))

        def _fire() -> None:
            try:
                callback()
            except Exception:
                log.exception("Deferred task failed")
            finally:
                timer.deleteLater()

        timer.timeout.connect(_fire)
        timer.start()
        return _QtDeferredTask(timer)
