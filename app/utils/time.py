from datetime import date, datetime, time, timedelta, timezone
from typing import Optional


def utc_now() -> datetime:
    """Return a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes (SQLite hands them back without tzinfo)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def start_of_day(now: datetime) -> datetime:
    now = ensure_utc(now)
    return datetime.combine(now.date(), time.min, tzinfo=timezone.utc)


def start_of_month(now: datetime) -> datetime:
    return start_of_day(now).replace(day=1)


def start_of_previous_month(now: datetime) -> datetime:
    first = start_of_month(now)
    return (first - timedelta(days=1)).replace(day=1)


def start_of_week(now: datetime, week_starts_on: int = 6) -> datetime:
    """
    Midnight of the first day of the current week.

    `week_starts_on` uses Python's weekday numbering (Monday=0 ... Sunday=6).
    """
    today = start_of_day(now)
    offset = (today.weekday() - week_starts_on) % 7
    return today - timedelta(days=offset)


def days_between(later: datetime, earlier: datetime) -> int:
    """Whole days elapsed between two instants (floored)."""
    return (ensure_utc(later) - ensure_utc(earlier)).days


def is_same_day(value: Optional[datetime], now: datetime) -> bool:
    if value is None:
        return False
    return ensure_utc(value).date() == ensure_utc(now).date()


def parse_date_maybe(value) -> Optional[date]:
    """Best-effort date parsing for spreadsheet cells."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    for fmt in ("%Y-%m-%d", "%d/%m/%Y", "%m/%d/%Y", "%d-%m-%Y", "%Y/%m/%d"):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None
