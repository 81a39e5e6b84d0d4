import json
from datetime import datetime, timezone

import pytest

from notes_widget.core.models import Note
from notes_widget.settings import NOTES_KEY, THEME_KEY
from notes_widget.storage.kv import MemoryKeyValueStore
from notes_widget.storage.persistence import NotesPersistence, ThemePreference

T0 = datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)
T1 = datetime(2024, 1, 3, 8, 0, 0, tzinfo=timezone.utc)


def sample_notes():
    return [
        Note(id="b", title="Second", content="eggs", starred=True, created_at=T0, updated_at=T1),
        Note(id="a", title="First", content="milk\nbread", created_at=T0, updated_at=T0),
    ]


def test_round_trip():
    kv = MemoryKeyValueStore()
    p = NotesPersistence(kv)
    notes = sample_notes()

    assert p.save(notes) is True
    assert p.load() == notes


def test_wire_format():
    kv = MemoryKeyValueStore()
    NotesPersistence(kv).save(sample_notes()[:1])

    record = json.loads(kv.data[NOTES_KEY])[0]
    assert set(record) == {"id", "title", "content", "starred", "createdAt", "updatedAt"}
    assert record["starred"] is True
    assert datetime.fromisoformat(record["updatedAt"]) == T1


def test_load_absent_key_is_empty():
    assert NotesPersistence(MemoryKeyValueStore()).load() == []


def test_load_legacy_record_defaults_starred():
    kv = MemoryKeyValueStore({
        NOTES_KEY: json.dumps([{
            "id": "x1",
            "title": "Old",
            "content": "from the browser",
            "createdAt": "2024-01-02T03:04:05.678Z",
            "updatedAt": "2024-01-03T08:00:00.000Z",
        }])
    })

    [note] = NotesPersistence(kv).load()
    assert note.starred is False
    assert note.created_at == T0
    assert note.updated_at == T1


@pytest.mark.parametrize("raw", ["{not json", "42", '{"id": "a"}', "null"])
def test_load_corrupt_data_starts_empty(raw):
    kv = MemoryKeyValueStore({NOTES_KEY: raw})
    assert NotesPersistence(kv).load() == []


def test_load_skips_records_without_id_and_duplicates():
    good = sample_notes()[1].to_record()
    kv = MemoryKeyValueStore({
        NOTES_KEY: json.dumps([
            good,
            "not an object",
            {"title": "no id", "createdAt": "2024-01-01T00:00:00Z"},
            {"id": "bad-ts", "createdAt": "yesterday"},
            dict(good, title="duplicate"),
        ])
    })

    notes = NotesPersistence(kv).load()
    assert [(n.id, n.title) for n in notes] == [("a", "First"), ("bad-ts", "Untitled Note")]


def test_save_failure_is_reported_not_raised():
    kv = MemoryKeyValueStore()
    p = NotesPersistence(kv)
    p.save(sample_notes())
    before = kv.data[NOTES_KEY]

    kv.fail_writes = True
    notes = sample_notes()
    assert p.save(notes) is False
    assert kv.data[NOTES_KEY] == before
    assert notes == sample_notes()


def test_load_read_failure_starts_empty():
    kv = MemoryKeyValueStore({NOTES_KEY: "[]"})
    kv.fail_reads = True
    assert NotesPersistence(kv).load() == []


def test_theme_absent_follows_system():
    theme = ThemePreference(MemoryKeyValueStore())
    assert theme.load() is None
    assert theme.resolve(system_prefers_dark=True) == "dark"
    assert theme.resolve(system_prefers_dark=False) == "light"


def test_theme_saved_value_wins():
    kv = MemoryKeyValueStore()
    theme = ThemePreference(kv)

    assert theme.save("light") is True
    assert kv.data[THEME_KEY] == "light"
    assert theme.resolve(system_prefers_dark=True) == "light"

    assert theme.toggle("light") == "dark"
    assert theme.load() == "dark"

    assert theme.clear() is True
    assert theme.load() is None


def test_theme_unknown_value_is_ignored():
    theme = ThemePreference(MemoryKeyValueStore({THEME_KEY: "sepia"}))
    assert theme.load() is None
    with pytest.raises(ValueError):
        theme.save("sepia")


def test_round_trip_keeps_padded_title():
    kv = MemoryKeyValueStore()
    p = NotesPersistence(kv)
    notes = [Note(id="a", title=" Groceries ", content="  milk  ", created_at=T0, updated_at=T1)]

    p.save(notes)
    assert p.load() == notes


def test_legacy_record_without_timestamps_survives_resave():
    kv = MemoryKeyValueStore({
        NOTES_KEY: json.dumps([{"id": "old", "title": "Keep", "content": "precious"}])
    })
    p = NotesPersistence(kv)

    [note] = p.load()
    assert (note.id, note.title, note.content, note.starred) == ("old", "Keep", "precious", False)

    assert p.save([note]) is True
    [record] = json.loads(kv.data[NOTES_KEY])
    assert record["id"] == "old"
    assert record["content"] == "precious"
    assert p.load() == [note]
