import calendar
from datetime import datetime, date, timedelta
from zoneinfo import ZoneInfo


def now_for_tz(tz_name: str | None) -> datetime:
    """Return the current wall-clock time in the given timezone (host zone fallback)."""
    if tz_name:
        try:
            return datetime.now(ZoneInfo(tz_name))
        except Exception:
            pass
    return datetime.now().astimezone()


def today_for_tz(tz_name: str | None) -> date:
    """Return today's calendar date in the given timezone."""
    return now_for_tz(tz_name).date()


def parse_date(value: date | datetime | str) -> date:
    """Coerce a date, datetime or YYYY-MM-DD string into a calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        raw = value.strip()
        # ISO timestamps carry the calendar date in their first 10 characters.
        if len(raw) > 10 and raw[10] in {"T", " "}:
            raw = raw[:10]
        try:
            return date.fromisoformat(raw)
        except ValueError:
            raise ValueError(f"Invalid date: {value!r} (expected YYYY-MM-DD)") from None
    raise ValueError(f"Unsupported date value: {value!r}")


def days_between(start: date, end: date) -> int:
    """Whole calendar days from start to end (negative when end is earlier)."""
    return (end - start).days


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]
