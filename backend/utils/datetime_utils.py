from datetime import datetime, date, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from config import settings
from services.errors import InvalidState


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def reference_zone(tz_name: str | None = None) -> ZoneInfo:
    """Return the zone calendar days are cut in."""
    name = (tz_name or settings.TIMEZONE or "UTC").strip()
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise InvalidState(f"Unknown timezone: {name!r}")


def _parse_iso(value: str) -> date | datetime:
    text = value.strip()
    if not text:
        raise InvalidState("Empty date string")
    if len(text) == 10:
        try:
            return date.fromisoformat(text)
        except ValueError:
            raise InvalidState(f"Invalid date: {value!r}")
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise InvalidState(f"Invalid timestamp: {value!r}")


def calendar_day(value, tz_name: str | None = None) -> date:
    """
    Normalize a timestamp to its calendar-day key in the reference zone.

    Aware datetimes are converted to the reference zone first; naive ones
    are read as wall-clock time already in that zone. Dates pass through.
    ISO-8601 strings are parsed. Anything else raises InvalidState.
    """
    if isinstance(value, str):
        value = _parse_iso(value)
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(reference_zone(tz_name))
        return value.date()
    if isinstance(value, date):
        return value
    raise InvalidState(f"Cannot normalize {type(value).__name__} to a calendar day")


def parse_day(text: str | None) -> date:
    """Parse a YYYY-MM-DD query value."""
    if not text or not isinstance(text, str):
        raise InvalidState("Date parameter is required (YYYY-MM-DD)")
    try:
        return date.fromisoformat(text.strip())
    except ValueError:
        raise InvalidState(f"Invalid date: {text!r}. Use YYYY-MM-DD")


def is_today(value, now: datetime, tz_name: str | None = None) -> bool:
    return calendar_day(value, tz_name) == calendar_day(now, tz_name)


def is_yesterday(value, now: datetime, tz_name: str | None = None) -> bool:
    return calendar_day(value, tz_name) == calendar_day(now, tz_name) - timedelta(days=1)


def day_window(d: date) -> tuple[date, date]:
    """Half-open [d, d + 1 day) interval."""
    return d, d + timedelta(days=1)
