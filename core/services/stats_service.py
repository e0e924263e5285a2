"""
User Stats Service

Small headline figures for the dashboard header: streak, score and
this week's goals.
"""
from typing import Dict

from core.models import Task, Goal
from core.helpers import metric_helpers
from core.helpers.cache_helpers import get_user_cached, set_user_cached
from core.utils.constants import TASK_STATUS_COMPLETED, STATS_STREAK_LOOKBACK
from core.utils.time_utils import start_of_day, week_start, today as local_today


class StatsService:

    @staticmethod
    def get_user_stats(user) -> Dict:
        cached = get_user_cached('stats', user.id)
        if cached is not None:
            return cached

        stats = StatsService.compute_user_stats(user)
        set_user_cached('stats', user.id, stats)
        return stats

    @staticmethod
    def compute_user_stats(user) -> Dict:
        """
        Streak here has no grace day: nothing completed today means 0.
        """
        today = local_today()
        tasks = list(Task.objects.filter(user=user).only('status', 'completed_at'))

        total = len(tasks)
        completed = sum(1 for t in tasks if t.status == TASK_STATUS_COMPLETED)
        rate = metric_helpers.completion_rate(completed, total)

        streak = metric_helpers.consecutive_day_streak(
            [t.completed_at for t in tasks if t.completed_at],
            today,
            max_days=STATS_STREAK_LOOKBACK,
        )

        week_goals = Goal.objects.filter(user=user, created_at__gte=start_of_day(week_start(today)))

        return {
            'streak': streak,
            'productivity_score': metric_helpers.productivity_score_stats(rate, streak),
            'tasks_completed': completed,
            'total_tasks': total,
            'weekly_goals': week_goals.count(),
            'completed_goals': week_goals.filter(completed=True).count(),
            'completion_rate': metric_helpers.round_half_up(rate),
            'achievements': [],
        }
