from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Iterable

from notes_widget.errors import MalformedDataError
from notes_widget.settings import PLACEHOLDER_TITLE

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def generate_note_id(existing: Iterable[str] = ()) -> str:
    taken = set(existing)
    while True:
        note_id = uuid.uuid4().hex
        if note_id not in taken:
            return note_id


def normalize_title(title: str | None) -> str:
    """Blank title -> placeholder. Any other title is kept exactly as typed."""
    if title is None or not title.strip():
        return PLACEHOLDER_TITLE
    return title


@dataclass
class Note:
    id: str
    title: str = PLACEHOLDER_TITLE
    content: str = ""
    starred: bool = False
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @classmethod
    def new(cls, note_id: str, *, now: datetime) -> "Note":
        return cls(id=note_id, created_at=now, updated_at=now)

    @property
    def display_title(self) -> str:
        return normalize_title(self.title)

    def matches(self, needle: str) -> bool:
        """Case-insensitive substring match on title or content."""
        needle = needle.lower()
        return needle in self.title.lower() or needle in self.content.lower()

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            # an uncommitted blank title is never written as ""
            "title": self.display_title,
            "content": self.content,
            "starred": self.starred,
            "createdAt": format_timestamp(self.created_at),
            "updatedAt": format_timestamp(self.updated_at),
        }

    @classmethod
    def from_record(cls, record: Any, *, now: datetime | None = None) -> "Note":
        """
        Build a Note from a deserialized record.
        Legacy records may lack fields: every optional field gets an explicit default.
        Bad timestamps fall back (createdAt -> updatedAt -> now), so only a record
        without a usable id raises MalformedDataError.
        """
        if not isinstance(record, dict):
            raise MalformedDataError(f"note record must be an object, got {type(record).__name__}")

        note_id = record.get("id")
        if not isinstance(note_id, str) or not note_id:
            raise MalformedDataError(f"note record has no usable id: {note_id!r}")

        title = record.get("title")
        content = record.get("content")
        created_at = _try_parse_timestamp(record.get("createdAt"))
        updated_at = _try_parse_timestamp(record.get("updatedAt"))
        if created_at is None:
            created_at = updated_at or now or utc_now()
        if updated_at is None:
            updated_at = created_at

        return cls(
            id=note_id,
            title=normalize_title(title if isinstance(title, str) else None),
            content=content if isinstance(content, str) else "",
            starred=bool(record.get("starred") or False),
            created_at=created_at,
            updated_at=max(updated_at, created_at),
        )


def format_timestamp(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat()


def _try_parse_timestamp(value: Any) -> datetime | None:
    try:
        return parse_timestamp(value)
    except MalformedDataError:
        return None


def parse_timestamp(value: Any, *, default: datetime | None = None) -> datetime:
    """
    ISO-8601 string -> aware datetime (UTC if no offset given).
    Accepts the trailing "Z" that browsers write.
    """
    if value is None and default is not None:
        return default
    if not isinstance(value, str) or not value.strip():
        raise MalformedDataError(f"bad timestamp: {value!r}")

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(text)
    except ValueError as e:
        raise MalformedDataError(f"bad timestamp: {value!r}") from e

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt
