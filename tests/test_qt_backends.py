import time

import pytest
from PySide6.QtCore import QCoreApplication, QSettings

from notes_widget.services.scheduler import QtScheduler
from notes_widget.storage.kv import QSettingsKeyValueStore
from notes_widget.storage.persistence import NotesPersistence, ThemePreference
from notes_widget.core.models import Note


@pytest.fixture(scope="module")
def qapp():
    return QCoreApplication.instance() or QCoreApplication([])


@pytest.fixture
def settings(tmp_path):
    return QSettings(str(tmp_path / "notes.ini"), QSettings.Format.IniFormat)


def pump(app, until, timeout_s=2.0):
    deadline = time.monotonic() + timeout_s
    while not until() and time.monotonic() < deadline:
        app.processEvents()
        time.sleep(0.005)


def test_qsettings_store_get_set_remove(settings):
    kv = QSettingsKeyValueStore(settings)
    assert kv.get("missing") is None

    kv.set("k", "a, b, c")
    assert kv.get("k") == "a, b, c"

    kv.remove("k")
    assert kv.get("k") is None


def test_qsettings_store_survives_reopen(tmp_path):
    path = str(tmp_path / "notes.ini")
    p = NotesPersistence(QSettingsKeyValueStore(QSettings(path, QSettings.Format.IniFormat)))
    notes = [Note(id="a", title="Groceries", content="milk, eggs\nbread")]
    assert p.save(notes) is True
    ThemePreference(QSettingsKeyValueStore(QSettings(path, QSettings.Format.IniFormat))).save("dark")

    reopened = QSettingsKeyValueStore(QSettings(path, QSettings.Format.IniFormat))
    assert NotesPersistence(reopened).load() == notes
    assert ThemePreference(reopened).load() == "dark"


def test_qt_scheduler_fires_once(qapp):
    fired = []
    task = QtScheduler().call_later(10, lambda: fired.append(1))
    assert task.active

    pump(qapp, lambda: fired)
    assert fired == [1]
    assert not task.active


def test_qt_scheduler_cancel(qapp):
    fired = []
    task = QtScheduler().call_later(20, lambda: fired.append(1))
    task.cancel()
    assert not task.active

    pump(qapp, lambda: False, timeout_s=0.1)
    assert fired == []
