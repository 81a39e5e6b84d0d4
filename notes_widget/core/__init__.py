from .models import Note, generate_note_id, normalize_title
from .query import search_notes, sort_notes
from .timefmt import format_date, format_time

__all__ = ["Note",
           "generate_note_id",
           "normalize_title",
           "search_notes",
           "sort_notes",
           "format_date",
           "format_time",
           ]
