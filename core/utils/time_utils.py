"""
Time utility functions for Daily Priority.

Day boundaries are computed in Django's current timezone, so "today" for a
streak or a trend bucket matches what the user sees on the dashboard.
"""
from datetime import date, datetime, time, timedelta
from typing import List, Optional, Tuple

from dateutil.relativedelta import relativedelta
from django.utils import timezone


def today() -> date:
    return timezone.localdate()


def day_bounds(day: date) -> Tuple[datetime, datetime]:
    """
    Aware [start, end) range covering a calendar day.

    Examples:
        >>> day_bounds(date(2025, 12, 3))
        (datetime(2025, 12, 3, 0, 0, tzinfo=...), datetime(2025, 12, 4, 0, 0, tzinfo=...))
    """
    tz = timezone.get_current_timezone()
    start = timezone.make_aware(datetime.combine(day, time.min), tz)
    end = timezone.make_aware(datetime.combine(day + timedelta(days=1), time.min), tz)
    return start, end


def start_of_day(day: date) -> datetime:
    return day_bounds(day)[0]


def local_date(dt: Optional[datetime]) -> Optional[date]:
    """Calendar date of an aware datetime in the current timezone."""
    if dt is None:
        return None
    if timezone.is_naive(dt):
        return dt.date()
    return timezone.localtime(dt).date()


def last_n_days(n: int, today_: Optional[date] = None) -> List[date]:
    """``n`` dates ending at today, oldest first."""
    end = today_ or today()
    return [end - timedelta(days=offset) for offset in range(n - 1, -1, -1)]


def week_start(day: date) -> date:
    """Sunday that starts the week containing ``day``."""
    # weekday(): Monday=0 .. Sunday=6
    days_since_sunday = (day.weekday() + 1) % 7
    return day - timedelta(days=days_since_sunday)


def month_start(day: date) -> date:
    return day.replace(day=1)


def add_months(day: date, months: int) -> date:
    return day + relativedelta(months=months)


def parse_date(value) -> Optional[date]:
    """
    Parse ``YYYY-MM-DD`` or an ISO datetime into a date.

    Returns None for empty or unparseable input.
    """
    if value in (None, ''):
        return None
    if isinstance(value, datetime):
        return local_date(value)
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def parse_datetime(value) -> Optional[datetime]:
    """
    Parse an ISO 8601 string (``Z`` suffix allowed) into an aware datetime.

    A bare date is read as midnight in the current timezone.
    Returns None for empty or unparseable input.
    """
    if value in (None, ''):
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, timezone.get_current_timezone())
    return parsed
