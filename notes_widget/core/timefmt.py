from __future__ import annotations

from datetime import datetime, timedelta, timezone, tzinfo


def _local(dt: datetime, tz: tzinfo | None) -> datetime:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(tz)


def format_time(dt: datetime, *, tz: tzinfo | None = None) -> str:
    """12-hour clock, e.g. "03:07 PM". tz=None -> local timezone."""
    return _local(dt, tz).strftime("%I:%M %p")


def format_date(dt: datetime, *, now: datetime | None = None, tz: tzinfo | None = None) -> str:
    """
    List label for a note timestamp:
      - less than a day ago -> time of day
      - one day             -> "Yesterday"
      - under a week        -> "N days ago"
      - older               -> YYYY-MM-DD
    """
    if now is None:
        now = datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    days = (now - dt) // timedelta(days=1)
    if days <= 0:
        return format_time(dt, tz=tz)
    if days == 1:
        return "Yesterday"
    if days < 7:
        return f"{days} days ago"
    return _local(dt, tz).strftime("%Y-%m-%d")
