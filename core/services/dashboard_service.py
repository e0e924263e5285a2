"""
Dashboard Service

One call that gathers the counters the dashboard home page shows.
"""
from datetime import timedelta
from typing import Dict

from django.db.models import Count, Q, Sum
from django.utils import timezone

from core.models import Task, Goal, FocusSession, CalendarEvent
from core.services.calendar_service import serialize_event
from core.services.preferences_service import PreferencesService
from core.utils.constants import TASK_STATUS_COMPLETED
from core.utils.time_utils import day_bounds, start_of_day, week_start, today as local_today


class DashboardService:

    @staticmethod
    def _focus_totals(user, start, end) -> Dict:
        totals = FocusSession.objects.filter(
            user=user, completed=True, date__gte=start, date__lt=end
        ).aggregate(minutes=Sum('duration'), sessions=Count('id'))
        return {'minutes': totals['minutes'] or 0, 'sessions': totals['sessions'] or 0}

    @staticmethod
    def get_dashboard_data(user) -> Dict:
        today = local_today()
        today_start, today_end = day_bounds(today)
        seven_days_start = start_of_day(today - timedelta(days=6))

        tasks = Task.objects.filter(user=user)
        open_tasks = tasks.exclude(status=TASK_STATUS_COMPLETED)
        task_counts = {
            'total': tasks.count(),
            'completed_today': tasks.filter(
                status=TASK_STATUS_COMPLETED,
                completed_at__gte=today_start,
                completed_at__lt=today_end,
            ).count(),
            'overdue': open_tasks.filter(due_date__lt=today_start).count(),
            'priority': open_tasks.filter(Q(urgent=True) | Q(important=True)).count(),
        }

        focus_today = DashboardService._focus_totals(user, today_start, today_end)
        focus_week = DashboardService._focus_totals(user, seven_days_start, today_end)

        goals = Goal.objects.filter(user=user)
        goal_counts = {
            'active': goals.filter(completed=False).count(),
            'completed_this_week': goals.filter(
                completed=True, updated_at__gte=start_of_day(week_start(today))
            ).count(),
        }

        upcoming = CalendarEvent.objects.filter(user=user, date__gte=today_start).order_by('date')[:3]

        prefs = PreferencesService.get_or_create(user)
        return {
            'user': {
                'name': user.get_full_name() or user.username,
                'email': user.email,
                'location': prefs.location,
                'timezone': prefs.timezone,
            },
            'tasks': task_counts,
            'focus': {
                'today_minutes': focus_today['minutes'],
                'today_sessions': focus_today['sessions'],
                'week_minutes': focus_week['minutes'],
                'week_sessions': focus_week['sessions'],
            },
            'goals': goal_counts,
            'calendar': {
                'upcoming_events': [serialize_event(e) for e in upcoming],
            },
            'generated_at': timezone.now().isoformat(),
        }
