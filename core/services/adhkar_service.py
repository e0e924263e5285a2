"""
Adhkar Service

Serves the built-in adhkar catalog and tracks how many repetitions of each
dhikr the user has done per day. One progress row per (user, dhikr, day);
recording a dhikr again on the same day overwrites its count.
"""
from datetime import timedelta
from typing import Dict, List, Optional

from core.models import AdhkarProgress
from core.exceptions import ValidationError
from core.helpers.metric_helpers import (
    completion_rate, consecutive_day_streak, longest_run, round_half_up,
)
from core.serializers import AdhkarProgressSerializer, validate_or_raise
from core.utils.adhkar_catalog import ADHKAR_CATALOG
from core.utils.constants import ADHKAR_CATEGORIES, ADHKAR_RECENT_DAYS, ADHKAR_STATS_DAYS
from core.utils.logging_utils import log_with_context
from core.utils.time_utils import last_n_days, parse_date, today as local_today


def serialize_progress(progress: AdhkarProgress) -> Dict:
    return {
        'id': progress.id,
        'adhkar_id': progress.adhkar_id,
        'adhkar_name': progress.adhkar_name,
        'category': progress.category,
        'count': progress.count,
        'target': progress.target,
        'completed': progress.completed,
        'date': progress.date.isoformat(),
    }


def _check_category(category: Optional[str]) -> Optional[str]:
    if category and category not in ADHKAR_CATEGORIES:
        raise ValidationError(
            'category', f"Category must be one of: {', '.join(ADHKAR_CATEGORIES)}"
        )
    return category or None


class AdhkarService:

    @staticmethod
    def catalog(category: Optional[str] = None) -> Dict[str, List[Dict]]:
        """The catalog keyed by category, optionally narrowed to one."""
        category = _check_category(category)
        if category:
            return {category: ADHKAR_CATALOG[category]}
        return ADHKAR_CATALOG

    def get_progress(self, user, date=None, category=None) -> List[Dict]:
        """Progress rows for one day (default today)."""
        category = _check_category(category)
        day = local_today()
        if date:
            day = parse_date(date)
            if day is None:
                raise ValidationError('date', 'Date must be in YYYY-MM-DD format')

        qs = AdhkarProgress.objects.filter(user=user, date=day)
        if category:
            qs = qs.filter(category=category)
        return [serialize_progress(p) for p in qs.order_by('adhkar_id')]

    def record_progress(self, user, data: Dict) -> Dict:
        """
        Upsert today's count for one dhikr.

        Raises:
            ValidationError: Missing adhkar_id, unknown category, negative
                count or a target below 1
        """
        validated = validate_or_raise(AdhkarProgressSerializer, data)
        count, target = validated['count'], validated['target']

        progress, created = AdhkarProgress.objects.update_or_create(
            user=user,
            adhkar_id=validated['adhkar_id'],
            date=local_today(),
            defaults={
                'adhkar_name': (validated.get('adhkar_name') or '').strip() or validated['adhkar_id'],
                'category': validated['category'],
                'count': count,
                'target': target,
                'completed': count >= target,
            },
        )

        log_with_context('info', 'Adhkar progress recorded', user_id=user.id,
                         adhkar_id=progress.adhkar_id, count=count,
                         completed=progress.completed, created=created)
        return serialize_progress(progress)

    def statistics(self, user) -> Dict:
        """
        Figures over the last 30 days, today included.

        A day counts toward a streak when at least one dhikr was completed.
        current_streak ends today, or yesterday while today is still empty.
        completion_rate is completed rows over all rows in the window.
        """
        today = local_today()
        window = last_n_days(ADHKAR_STATS_DAYS, today)
        rows = list(AdhkarProgress.objects.filter(user=user, date__gte=window[0], date__lte=today))

        per_day = {day: {'completed': 0, 'total': 0} for day in window}
        by_category = {category: 0 for category in ADHKAR_CATEGORIES}
        for row in rows:
            bucket = per_day[row.date]
            bucket['total'] += 1
            if row.completed:
                bucket['completed'] += 1
                by_category[row.category] = by_category.get(row.category, 0) + 1

        total_completions = sum(by_category.values())
        active_days = [day for day, bucket in per_day.items() if bucket['completed']]
        recent_start = today - timedelta(days=ADHKAR_RECENT_DAYS - 1)

        return {
            'total_completions': total_completions,
            'category_completions': by_category,
            'current_streak': consecutive_day_streak(
                active_days, today, max_days=ADHKAR_STATS_DAYS, allow_today_gap=True
            ),
            'longest_streak': longest_run(active_days),
            'completion_rate': round_half_up(completion_rate(total_completions, len(rows))),
            'last_7_days': [
                per_day[day]['completed'] > 0 for day in window if day >= recent_start
            ],
            'last_30_days': [
                {'date': day.isoformat(), **per_day[day]} for day in window
            ],
        }
