"""Calendar and duration helpers.

Trades are stored as UTC instants, but every "same day" question the journal
asks (0DTE, swing-day, weekday buckets, days passed) is answered on the wall
clock of the journal timezone. All helpers return None instead of raising when
a timestamp is missing.
"""

from datetime import date, datetime, timezone, tzinfo
from functools import lru_cache
from zoneinfo import ZoneInfo

from journal.utils.constants import DAY_NAMES, WEEKEND_EXCLUDED, Weekday


@lru_cache(maxsize=None)
def resolve_timezone(name: str) -> ZoneInfo:
    return ZoneInfo(name)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on read)."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_timestamp(value) -> datetime | None:
    """Parse an ISO-8601 string or datetime into an aware UTC datetime.

    Unparseable or empty input yields None.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    if not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return ensure_utc(datetime.fromisoformat(text))
    except ValueError:
        return None


def to_local(dt: datetime | None, tz: tzinfo) -> datetime | None:
    dt = ensure_utc(dt)
    return dt.astimezone(tz) if dt is not None else None


def local_date(dt: datetime | None, tz: tzinfo) -> date | None:
    local = to_local(dt, tz)
    return local.date() if local is not None else None


def same_calendar_day(a: datetime | None, b: datetime | None, tz: tzinfo) -> bool:
    day_a = local_date(a, tz)
    day_b = local_date(b, tz)
    return day_a is not None and day_a == day_b


def calendar_days_between(start: datetime | None, end: datetime | None, tz: tzinfo) -> int | None:
    """Whole calendar days from start's local date to end's, clamped to >= 0."""
    start_day = local_date(start, tz)
    end_day = local_date(end, tz)
    if start_day is None or end_day is None:
        return None
    return max((end_day - start_day).days, 0)


def day_name(dt: datetime | None, tz: tzinfo) -> str | None:
    day = local_date(dt, tz)
    return DAY_NAMES[day.weekday()] if day is not None else None


def weekday_bucket(dt: datetime | None, tz: tzinfo) -> Weekday | None:
    """Map a timestamp onto a Monday-Friday bucket; weekends map to None."""
    day = local_date(dt, tz)
    if day is None or day.weekday() in WEEKEND_EXCLUDED:
        return None
    return Weekday(day.weekday())


def time_of_day(dt: datetime | None, tz: tzinfo) -> str | None:
    """Local wall-clock "HH:MM", comparable as a string."""
    local = to_local(dt, tz)
    return local.strftime("%H:%M") if local is not None else None


def format_duration(seconds: float | None) -> str | None:
    """Render seconds as "1h 2m 3s" (hours and minutes omitted when zero)."""
    if seconds is None:
        return None
    ms = int(round(seconds * 1000))
    hours = ms // 3_600_000
    minutes = (ms % 3_600_000) // 60_000
    secs = round((ms % 60_000) / 1000)
    result = ""
    if hours > 0:
        result += f"{hours}h "
    if minutes > 0 or hours > 0:
        result += f"{minutes}m "
    return result + f"{secs}s"


def ordinal(n: int) -> str:
    """1 -> "1st", 2 -> "2nd", 11 -> "11th", 23 -> "23rd"."""
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"
