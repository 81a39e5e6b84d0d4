from __future__ import annotations

from typing import Iterable

from notes_widget.core.models import Note


def search_notes(notes: Iterable[Note], query: str | None) -> list[Note]:
    """
    Pure filter: blank query -> everything, otherwise notes whose title
    or content contains the query (case-insensitive). Input order is kept.
    """
    notes = list(notes)
    if not query or not query.strip():
        return notes
    return [n for n in notes if n.matches(query)]


def sort_notes(notes: Iterable[Note]) -> list[Note]:
    """
    Display order: starred first, then most recently updated.
    sorted() is stable, so ties keep the input order.
    """
    return sorted(notes, key=lambda n: (not n.starred, -n.updated_at.timestamp()))
