import sys
import os

import pytest

sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from fakes import ManualScheduler
from notes_widget.services.note_store import NoteStore
from notes_widget.storage.kv import MemoryKeyValueStore
from notes_widget.storage.persistence import NotesPersistence


@pytest.fixture
def kv():
    return MemoryKeyValueStore()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def store(kv, scheduler):
    return NoteStore(NotesPersistence(kv), scheduler=scheduler, clock=scheduler.clock)
