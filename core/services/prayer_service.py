"""
Prayer Tracking Service

One log row per (user, day, prayer). Tracking a prayer twice on the same
day updates the existing row.
"""
from datetime import timedelta
from typing import Dict, List, Optional

from django.utils import timezone

from core.models import PrayerTracking
from core.exceptions import ValidationError, InvalidDateRangeError
from core.helpers.cache_helpers import invalidate_user_cache
from core.helpers.metric_helpers import consecutive_day_streak, longest_run, round_half_up
from core.serializers import PrayerTrackSerializer, validate_or_raise
from core.utils.constants import PRAYER_NAMES, DEFAULT_PRAYER_STATS_DAYS
from core.utils.logging_utils import log_with_context
from core.utils.time_utils import parse_date, today as local_today


def serialize_prayer_log(log: PrayerTracking) -> Dict:
    return {
        'id': log.id,
        'date': log.date.isoformat(),
        'prayer_name': log.prayer_name,
        'completed': log.completed,
        'completed_at': log.completed_at.isoformat() if log.completed_at else None,
        'on_time': log.on_time,
    }


def parse_days(value, default=DEFAULT_PRAYER_STATS_DAYS, maximum=365) -> int:
    try:
        days = int(value)
    except (TypeError, ValueError):
        return default
    return max(1, min(maximum, days))


class PrayerService:

    def track(self, user, data: Dict) -> Dict:
        """
        Upsert a prayer log.

        Raises:
            ValidationError: If date or prayer_name is missing, or the name is
                not one of the five daily prayers
        """
        validated = validate_or_raise(PrayerTrackSerializer, data)

        log, created = PrayerTracking.objects.update_or_create(
            user=user,
            date=validated['date'],
            prayer_name=validated['prayer_name'],
            defaults={
                'completed_at': timezone.now() if validated['completed'] else None,
                'on_time': bool(validated['on_time']),
            },
        )
        invalidate_user_cache(user.id, 'analytics')

        log_with_context('info', 'Prayer tracked', user_id=user.id,
                         prayer=log.prayer_name, date=log.date.isoformat(),
                         completed=log.completed, created=created)
        return serialize_prayer_log(log)

    def list_logs(self, user, date=None, start_date=None, end_date=None) -> List[Dict]:
        """
        Logs for a single day, an inclusive range, or everything.

        ``date`` wins over the range when both are given.
        """
        qs = PrayerTracking.objects.filter(user=user)

        if date:
            day = parse_date(date)
            if day is None:
                raise ValidationError('date', 'Date must be in YYYY-MM-DD format')
            qs = qs.filter(date=day)
        elif start_date and end_date:
            start, end = parse_date(start_date), parse_date(end_date)
            if start is None or end is None:
                raise ValidationError('start_date', 'Dates must be in YYYY-MM-DD format')
            if start > end:
                raise InvalidDateRangeError(start, end)
            qs = qs.filter(date__gte=start, date__lte=end)

        return [serialize_prayer_log(log) for log in qs.order_by('-date', 'prayer_name')]

    def stats(self, user, days: Optional[int] = None) -> Dict:
        """
        Completion statistics over the last ``days`` days.

        A "full day" has all five prayers completed. current_streak counts
        full days ending today, or ending yesterday while today is still in
        progress. best_streak is the longest full-day run in the window.
        """
        days = days or DEFAULT_PRAYER_STATS_DAYS
        today = local_today()
        since = today - timedelta(days=days)

        logs = list(PrayerTracking.objects.filter(user=user, date__gte=since))

        total = len(logs)
        completed_logs = [log for log in logs if log.completed]
        completed = len(completed_logs)
        on_time = sum(1 for log in completed_logs if log.on_time)

        completion_rate = completed / total * 100 if total else 0
        on_time_rate = on_time / completed * 100 if completed else 0

        per_prayer = {name: {'completed': 0, 'on_time': 0, 'total': 0} for name in PRAYER_NAMES}
        completed_by_day = {}
        for log in logs:
            bucket = per_prayer[log.prayer_name]
            bucket['total'] += 1
            if log.completed:
                bucket['completed'] += 1
                if log.on_time:
                    bucket['on_time'] += 1
                completed_by_day.setdefault(log.date, set()).add(log.prayer_name)

        full_days = [day for day, names in completed_by_day.items() if len(names) == len(PRAYER_NAMES)]

        return {
            'days': days,
            'total_prayers': total,
            'completed_prayers': completed,
            'on_time_prayers': on_time,
            'completion_rate': round_half_up(completion_rate, 2),
            'on_time_rate': round_half_up(on_time_rate, 2),
            'current_streak': consecutive_day_streak(
                full_days, today, max_days=days + 1, allow_today_gap=True
            ),
            'best_streak': longest_run(full_days),
            'prayer_stats': per_prayer,
        }
