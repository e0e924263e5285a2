"""
Export Service
Bundles everything a user owns into one JSON-serializable document.
"""
from django.conf import settings
from django.utils import timezone

from core.models import (
    Task, Category, Habit, Goal, JournalEntry, PrayerTracking, FocusSession, CalendarEvent,
    AdhkarProgress,
)
from core.services.task_service import serialize_task, serialize_category
from core.services.habit_service import serialize_habit
from core.services.goal_service import serialize_goal
from core.services.journal_service import serialize_entry
from core.services.prayer_service import serialize_prayer_log
from core.services.focus_service import FocusService, serialize_focus_settings, serialize_session
from core.services.adhkar_service import serialize_progress
from core.services.calendar_service import serialize_event
from core.services.preferences_service import PreferencesService, serialize_preferences


class ExportService:
    """Service for exporting user data"""

    def __init__(self, user):
        self.user = user

    def export_all(self) -> dict:
        user = self.user
        habits = Habit.objects.filter(user=user).prefetch_related('completions')
        tasks = (
            Task.objects.filter(user=user)
            .select_related('category')
            .prefetch_related('subtasks')
            .order_by('created_at')
        )

        return {
            'exported_at': timezone.now().isoformat(),
            'version': getattr(settings, 'APP_VERSION', '1.0.0'),
            'user': {
                'id': user.id,
                'username': user.username,
                'name': user.get_full_name(),
                'email': user.email,
                'date_joined': user.date_joined.isoformat(),
            },
            'preferences': serialize_preferences(PreferencesService.get_or_create(user)),
            'focus_settings': serialize_focus_settings(FocusService.get_or_create_settings(user)),
            'data': {
                'tasks': [serialize_task(t) for t in tasks],
                'categories': [serialize_category(c) for c in Category.objects.filter(user=user)],
                'habits': [
                    serialize_habit(h, sorted(h.completions.all(), key=lambda c: c.date))
                    for h in habits
                ],
                'goals': [serialize_goal(g) for g in Goal.objects.filter(user=user)],
                'journal': [serialize_entry(e) for e in JournalEntry.objects.filter(user=user)],
                'prayer_logs': [serialize_prayer_log(p) for p in PrayerTracking.objects.filter(user=user)],
                'focus_sessions': [serialize_session(s) for s in FocusSession.objects.filter(user=user)],
                'calendar_events': [serialize_event(e) for e in CalendarEvent.objects.filter(user=user)],
                'adhkar_progress': [serialize_progress(p) for p in AdhkarProgress.objects.filter(user=user)],
            },
        }

    def export_filename(self) -> str:
        return f"daily-priority-export-{timezone.localdate().isoformat()}.json"
