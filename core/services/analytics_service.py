"""
Analytics Service

Builds the per-user analytics report and the nightly DailyAnalytics
snapshot.

Rows are fetched once per report and reduced in memory. Every lookback
is bounded: 365 days for the completion streak, 90 days for patterns,
the current month for prayers and 7 days for analytics rows.
"""
import logging
from collections import Counter, OrderedDict
from datetime import date, timedelta
from typing import Dict, List, Optional

import pandas as pd
from django.contrib.auth import get_user_model
from django.db.models import Sum
from django.utils import timezone

from core.models import Task, Goal, PrayerTracking, DailyAnalytics, FocusSession
from core.behavioral.insights_engine import generate_insights
from core.helpers import metric_helpers
from core.helpers.cache_helpers import get_user_cached, set_user_cached, invalidate_user_cache
from core.utils.constants import (
    TASK_STATUS_COMPLETED,
    ANALYTICS_STREAK_LOOKBACK,
    PATTERN_LOOKBACK,
    DEFAULT_AVERAGE_TASK_TIME,
    MINUTES_PER_COMPLETED_TASK,
    DEFAULT_CATEGORY_COLOR,
    UNCATEGORIZED_NAME,
    EMPTY_CATEGORY_NAME,
    GOAL_REPORT_GROUPS,
    PRAYER_NAMES,
    PRAYER_DELAY_MINUTES,
)
from core.utils.logging_utils import log_with_context
from core.utils.time_utils import (
    day_bounds, local_date, start_of_day, week_start, month_start, add_months,
    today as local_today,
)

logger = logging.getLogger(__name__)

round_half_up = metric_helpers.round_half_up


# ============================================================================
# REPORT SECTIONS
# ============================================================================

def completion_streak(tasks, today: date) -> int:
    """Consecutive days with at least one completion; an empty today is allowed."""
    return metric_helpers.consecutive_day_streak(
        [t.completed_at for t in tasks if t.completed_at],
        today,
        max_days=ANALYTICS_STREAK_LOOKBACK,
        allow_today_gap=True,
    )


def average_task_time(tasks) -> int:
    estimates = [
        t.estimated_time for t in tasks
        if t.status == TASK_STATUS_COMPLETED and t.estimated_time
    ]
    if not estimates:
        return DEFAULT_AVERAGE_TASK_TIME
    return round_half_up(sum(estimates) / len(estimates))


def average_focus_hours(analytics_rows) -> float:
    if not analytics_rows:
        return 0
    hours = sum(row.focus_time_minutes for row in analytics_rows) / 60
    return round_half_up(hours / len(analytics_rows), 1)


def _period_counts(days: List[date], freq: str) -> Dict[date, int]:
    """Count dates per pandas period ('W-SAT' = Sunday-start weeks, 'M' = months)."""
    if not days:
        return {}
    periods = pd.Series(pd.to_datetime(days)).dt.to_period(freq)
    return {period.start_time.date(): int(n) for period, n in periods.value_counts().items()}


def build_trends(tasks, today: date) -> Dict:
    created_days = [local_date(t.created_at) for t in tasks if t.created_at]
    completed_days = [local_date(t.completed_at) for t in tasks if t.completed_at]

    created_daily = metric_helpers.bucket_daily(created_days, 7, today)
    completed_daily = metric_helpers.bucket_daily(completed_days, 7, today)
    daily = [
        {'date': day.isoformat(), 'completed': completed_daily[day], 'created': created_daily[day]}
        for day in created_daily
    ]

    created_weekly = _period_counts(created_days, 'W-SAT')
    completed_weekly = _period_counts(completed_days, 'W-SAT')
    this_week = week_start(today)
    weekly = []
    for offset in range(3, -1, -1):
        start = this_week - timedelta(weeks=offset)
        weekly.append({
            'week_start': start.isoformat(),
            'completed': completed_weekly.get(start, 0),
            'created': created_weekly.get(start, 0),
        })

    created_monthly = _period_counts(created_days, 'M')
    completed_monthly = _period_counts(completed_days, 'M')
    this_month = month_start(today)
    monthly = []
    for offset in range(2, -1, -1):
        start = add_months(this_month, -offset)
        monthly.append({
            'month': start.strftime('%Y-%m'),
            'completed': completed_monthly.get(start, 0),
            'created': created_monthly.get(start, 0),
        })

    return {'daily': daily, 'weekly': weekly, 'monthly': monthly}


def build_categories(tasks) -> List[Dict]:
    completed_total = sum(1 for t in tasks if t.status == TASK_STATUS_COMPLETED)
    if not tasks:
        return [{
            'name': EMPTY_CATEGORY_NAME,
            'completed': completed_total,
            'total': len(tasks),
            'color': DEFAULT_CATEGORY_COLOR,
            'time_spent': completed_total * MINUTES_PER_COMPLETED_TASK,
        }]

    categories: "OrderedDict[str, Dict]" = OrderedDict()
    for task in tasks:
        name = task.category.name if task.category else UNCATEGORIZED_NAME
        color = task.category.color if task.category else DEFAULT_CATEGORY_COLOR
        entry = categories.setdefault(name, {
            'name': name, 'completed': 0, 'total': 0, 'color': color, 'time_spent': 0,
        })
        entry['total'] += 1
        if task.status == TASK_STATUS_COMPLETED:
            entry['completed'] += 1
            entry['time_spent'] += MINUTES_PER_COMPLETED_TASK

    return list(categories.values())


def build_prayer_summary(logs) -> Dict:
    """
    Month-to-date prayer figures.

    ``streak`` counts completed logs from the most recent backwards and
    stops at the first missed one. Completed logs older than that miss
    never count, however many there are.
    """
    total = len(logs)
    completed = sum(1 for log in logs if log.completed)
    on_time = sum(1 for log in logs if log.on_time)

    prayer_order = {name: i for i, name in enumerate(PRAYER_NAMES)}
    newest_first = sorted(
        logs,
        key=lambda log: (log.date, prayer_order.get(log.prayer_name, 0)),
        reverse=True,
    )
    streak = 0
    for log in newest_first:
        if not log.completed:
            break
        streak += 1

    consistency = metric_helpers.completion_rate(completed, total)
    return {
        'consistency': round_half_up(consistency, 1),
        'streak': streak,
        'times_completed': completed,
        'average_delay': round_half_up((total - on_time) * PRAYER_DELAY_MINUTES, 1),
    }


def build_goal_groups(goals) -> Dict:
    groups = {}
    for key, category in GOAL_REPORT_GROUPS.items():
        in_category = [g for g in goals if g.category == category]
        groups[key] = {
            'completed': sum(1 for g in in_category if g.completed),
            'total': len(in_category),
        }
    return groups


def build_patterns(tasks, today: date) -> Dict:
    since = start_of_day(today - timedelta(days=PATTERN_LOOKBACK))
    stamps = [t.completed_at for t in tasks if t.completed_at and t.completed_at >= since]

    by_weekday = metric_helpers.bucket_weekday(stamps)
    by_hour = metric_helpers.bucket_hour(stamps)
    return {
        'by_weekday': by_weekday,
        'by_hour': by_hour,
        'best_weekday': metric_helpers.best_bucket(by_weekday, 'day'),
        'best_hour': metric_helpers.best_bucket(by_hour, 'hour'),
        'sample_size': len(stamps),
    }


# ============================================================================
# SERVICE
# ============================================================================

class AnalyticsService:
    """Generate analytics reports and daily snapshots."""

    @staticmethod
    def get_report(user) -> Dict:
        cached = get_user_cached('analytics', user.id)
        if cached is not None:
            return cached

        report = AnalyticsService.build_report(user)
        set_user_cached('analytics', user.id, report)
        return report

    @staticmethod
    def build_report(user, today: Optional[date] = None) -> Dict:
        today = today or local_today()

        tasks = list(Task.objects.filter(user=user).select_related('category').order_by('created_at'))
        goals = list(Goal.objects.filter(user=user))
        prayer_logs = list(PrayerTracking.objects.filter(user=user, date__gte=month_start(today)))
        analytics_rows = list(DailyAnalytics.objects.filter(
            user=user, date__gte=today - timedelta(days=7)
        ))

        total = len(tasks)
        completed = sum(1 for t in tasks if t.status == TASK_STATUS_COMPLETED)
        rate = metric_helpers.completion_rate(completed, total)
        streak = completion_streak(tasks, today)

        prayers = build_prayer_summary(prayer_logs)
        patterns = build_patterns(tasks, today)

        report = {
            'overview': {
                'tasks_completed': completed,
                'total_tasks': total,
                'completion_rate': round_half_up(rate, 1),
                'streak': streak,
                'productivity_score': metric_helpers.productivity_score_analytics(rate, streak),
                'average_task_time': average_task_time(tasks),
                'focus_time': average_focus_hours(analytics_rows),
                'weekly_goals': len(goals),
                'completed_goals': sum(1 for g in goals if g.completed),
            },
            'trends': build_trends(tasks, today),
            'categories': build_categories(tasks),
            'prayers': prayers,
            'goals': build_goal_groups(goals),
            'patterns': patterns,
            'insights': generate_insights(rate, streak, prayers['consistency'], patterns),
            'generated_at': timezone.now().isoformat(),
        }
        return report

    @staticmethod
    def snapshot_day(user, day: date) -> DailyAnalytics:
        """
        Upsert the DailyAnalytics row for ``user`` on ``day``.

        The score uses the completion streak as it stood at the end of ``day``.
        """
        start, end = day_bounds(day)
        tasks = Task.objects.filter(user=user)

        created = tasks.filter(created_at__gte=start, created_at__lt=end).count()
        completed_qs = tasks.filter(completed_at__gte=start, completed_at__lt=end)
        completed = completed_qs.count()

        focus_minutes = FocusSession.objects.filter(
            user=user, completed=True, date__gte=start, date__lt=end
        ).aggregate(total=Sum('duration'))['total'] or 0

        lookback_start = start_of_day(day - timedelta(days=ANALYTICS_STREAK_LOOKBACK))
        completion_stamps = tasks.filter(
            completed_at__gte=lookback_start, completed_at__lt=end
        ).values_list('completed_at', flat=True)
        streak = metric_helpers.consecutive_day_streak(
            completion_stamps, day, max_days=ANALYTICS_STREAK_LOOKBACK
        )

        # Tasks finished that day may have been created earlier
        if created:
            rate = min(metric_helpers.completion_rate(completed, created), 100)
        else:
            rate = 100 if completed else 0

        energy_levels = [e for e in completed_qs.values_list('energy_level', flat=True) if e]
        energy = Counter(energy_levels).most_common(1)[0][0] if energy_levels else None

        row, _ = DailyAnalytics.objects.update_or_create(
            user=user,
            date=day,
            defaults={
                'tasks_created': created,
                'tasks_completed': completed,
                'focus_time_minutes': focus_minutes,
                'productivity_score': metric_helpers.productivity_score_analytics(rate, streak),
                'energy_level': energy,
            },
        )

        invalidate_user_cache(user.id, 'analytics')
        return row

    @staticmethod
    def snapshot_all(day: date) -> int:
        """Snapshot every active user for ``day``. Returns the number of rows written."""
        User = get_user_model()
        count = 0
        for user in User.objects.filter(is_active=True).iterator():
            AnalyticsService.snapshot_day(user, day)
            count += 1

        log_with_context('info', 'Daily analytics snapshot complete',
                         date=day.isoformat(), users=count)
        return count
