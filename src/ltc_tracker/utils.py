"""Shared time helpers.

Calendar days are plain ``datetime.date`` values in UTC. Every stored or
compared day goes through to_calendar_day() or parse_day() so that a stat
posted as "2025-01-02T23:30:00-05:00" lands on 2025-01-03.
"""
from datetime import UTC, date, datetime

CalendarDay = date


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (the storage convention)."""
    return datetime.now(UTC).replace(tzinfo=None)


def to_calendar_day(value: date | datetime) -> CalendarDay:
    """Normalize a date or datetime to its UTC calendar day.

    Naive datetimes are taken to already be UTC.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(UTC)
        return value.date()
    return value


def parse_day(raw: str) -> CalendarDay:
    """Parse "YYYY-MM-DD" or a full ISO-8601 datetime into a calendar day.

    Raises:
        ValueError: if the string is empty or not a valid date.
    """
    text = (raw or "").strip()
    if not text:
        raise ValueError("date is required")
    if len(text) == 10:
        return date.fromisoformat(text)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return to_calendar_day(datetime.fromisoformat(text))


def whole_days_since(moment: datetime, now: datetime | None = None) -> int:
    """Number of full days elapsed since ``moment``."""
    return ((now or utcnow()) - moment).days
