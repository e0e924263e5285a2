"""
Import Service
Restores a document produced by ExportService into the requesting user's
account. Everything is written in one transaction: a single bad row rejects
the whole backup and nothing is saved.

Imported rows get fresh ids. Category and goal ids from the backup are only
used to re-link tasks to the rows created here.
"""
from typing import Dict

from django.db import transaction
from django.utils import timezone

from core.models import (
    AdhkarProgress, CalendarEvent, Category, FocusSession, Goal, Habit, HabitCompletion,
    JournalEntry, PrayerTracking, Subtask, Task,
)
from core.exceptions import ValidationError
from core.helpers.cache_helpers import invalidate_user_cache, TASK_NAMESPACES
from core.serializers import (
    AdhkarBackupSerializer,
    BackupDataSerializer,
    BackupSerializer,
    CalendarEventSerializer,
    CategoryCreateSerializer,
    FocusSessionSerializer,
    FocusSettingsSerializer,
    GoalUpdateSerializer,
    HabitBackupSerializer,
    JournalEntrySerializer,
    PreferencesSerializer,
    PrayerTrackSerializer,
    TaskBackupSerializer,
    validate_or_raise,
)
from core.services.focus_service import FocusService
from core.services.habit_service import HabitService
from core.services.journal_service import gratitude_slots
from core.services.preferences_service import PreferencesService
from core.utils.constants import DEFAULT_MOOD, TASK_STATUS_COMPLETED
from core.utils.logging_utils import log_with_context


def _validate_row(serializer_class, row, section: str, index: int) -> Dict:
    """Validate one backup row, naming its position on failure."""
    try:
        return validate_or_raise(serializer_class, row)
    except ValidationError as e:
        raise ValidationError(f"{section}[{index}].{e.field}", e.message)


class ImportService:
    """Service for restoring an exported backup"""

    def __init__(self, user):
        self.user = user
        self.categories = {}
        self.goals = {}

    def import_backup(self, payload: Dict) -> Dict:
        """
        Restore ``payload`` and return how many rows of each kind were created.

        Raises:
            ValidationError: The envelope is malformed or any row is invalid
        """
        envelope = validate_or_raise(BackupSerializer, payload)
        data = payload.get('data')
        if data is not None and not isinstance(data, dict):
            raise ValidationError('data', 'Expected a JSON object')
        sections = validate_or_raise(BackupDataSerializer, data or {})

        with transaction.atomic():
            stats = {
                'categories': self._import_categories(sections['categories']),
                'goals': self._import_goals(sections['goals']),
                'tasks': self._import_tasks(sections['tasks']),
                'habits': self._import_habits(sections['habits']),
                'journal': self._import_journal(sections['journal']),
                'prayer_logs': self._import_prayer_logs(sections['prayer_logs']),
                'focus_sessions': self._import_focus_sessions(sections['focus_sessions']),
                'calendar_events': self._import_events(sections['calendar_events']),
                'adhkar_progress': self._import_adhkar(sections['adhkar_progress']),
            }
            self._restore_settings(envelope)

        invalidate_user_cache(self.user.id, *TASK_NAMESPACES, 'focus')
        log_with_context('info', 'Backup imported', user_id=self.user.id,
                         backup_version=envelope['version'], **stats)
        return stats

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def _import_categories(self, rows) -> int:
        created = 0
        for i, row in enumerate(rows):
            validated = _validate_row(CategoryCreateSerializer, row, 'categories', i)
            category = Category.objects.filter(user=self.user, name__iexact=validated['name']).first()
            if category is None:
                category = Category.objects.create(user=self.user, **validated)
                created += 1
            if row.get('id'):
                self.categories[row['id']] = category
        return created

    def _import_goals(self, rows) -> int:
        for i, row in enumerate(rows):
            validated = _validate_row(GoalUpdateSerializer, row, 'goals', i)
            goal = Goal.objects.create(user=self.user, **validated)
            if row.get('id'):
                self.goals[row['id']] = goal
        return len(rows)

    def _category_for(self, ref):
        if not ref:
            return None
        if ref.get('id') in self.categories:
            return self.categories[ref['id']]
        name = (ref.get('name') or '').strip()
        if not name:
            return None
        return Category.objects.filter(user=self.user, name__iexact=name).first()

    def _import_tasks(self, rows) -> int:
        for i, row in enumerate(rows):
            validated = _validate_row(TaskBackupSerializer, row, 'tasks', i)
            subtasks = validated.pop('subtasks')
            category = self._category_for(validated.pop('category', None))
            goal = self.goals.get(validated.pop('goal_id', None))

            if not validated.get('created_at'):
                validated.pop('created_at', None)
            if validated['status'] == TASK_STATUS_COMPLETED and not validated.get('completed_at'):
                validated['completed_at'] = timezone.now()

            task = Task.objects.create(user=self.user, category=category, goal=goal, **validated)
            Subtask.objects.bulk_create([
                Subtask(task=task, title=str(s['title']).strip(), completed=bool(s.get('completed')))
                for s in subtasks if str(s.get('title') or '').strip()
            ])
        return len(rows)

    def _import_habits(self, rows) -> int:
        habits = HabitService()
        for i, row in enumerate(rows):
            validated = _validate_row(HabitBackupSerializer, row, 'habits', i)
            completions = validated.pop('completions')

            habit = Habit.objects.create(user=self.user, **validated)
            days = {}
            for completion in completions:
                if completion.get('date'):
                    days.setdefault(completion['date'], completion.get('note'))
            HabitCompletion.objects.bulk_create([
                HabitCompletion(habit=habit, date=day, note=note) for day, note in days.items()
            ])
            habits.refresh_streaks(habit)
        return len(rows)

    def _import_journal(self, rows) -> int:
        for i, row in enumerate(rows):
            validated = _validate_row(JournalEntrySerializer, row, 'journal', i)
            g1, g2, g3 = gratitude_slots(validated.get('gratitude'))
            entry = JournalEntry(
                user=self.user,
                gratitude1=g1,
                gratitude2=g2,
                gratitude3=g3,
                reflection=validated.get('reflection') or None,
                mood=validated.get('mood') or DEFAULT_MOOD,
            )
            if validated.get('date'):
                entry.date = validated['date']
            entry.save()
        return len(rows)

    def _import_prayer_logs(self, rows) -> int:
        for i, row in enumerate(rows):
            validated = _validate_row(PrayerTrackSerializer, row, 'prayer_logs', i)
            PrayerTracking.objects.update_or_create(
                user=self.user,
                date=validated['date'],
                prayer_name=validated['prayer_name'],
                defaults={
                    'completed_at': timezone.now() if validated['completed'] else None,
                    'on_time': validated['on_time'],
                },
            )
        return len(rows)

    def _import_focus_sessions(self, rows) -> int:
        for i, row in enumerate(rows):
            # Exports carry the finish time as ``date``
            row = {**row, 'completed_at': row.get('completed_at') or row.get('date')}
            validated = _validate_row(FocusSessionSerializer, row, 'focus_sessions', i)
            FocusSession.objects.create(
                user=self.user,
                duration=validated['duration'],
                session_type=validated['session_type'],
                task_title=(validated.get('task_title') or '').strip() or None,
                completed=True,
                date=validated.get('completed_at') or timezone.now(),
            )
        return len(rows)

    def _import_events(self, rows) -> int:
        for i, row in enumerate(rows):
            validated = _validate_row(CalendarEventSerializer, row, 'calendar_events', i)
            CalendarEvent.objects.create(user=self.user, **validated)
        return len(rows)

    def _import_adhkar(self, rows) -> int:
        for i, row in enumerate(rows):
            validated = _validate_row(AdhkarBackupSerializer, row, 'adhkar_progress', i)
            AdhkarProgress.objects.update_or_create(
                user=self.user,
                adhkar_id=validated['adhkar_id'],
                date=validated['date'],
                defaults={
                    'adhkar_name': (validated.get('adhkar_name') or '').strip() or validated['adhkar_id'],
                    'category': validated['category'],
                    'count': validated['count'],
                    'target': validated['target'],
                    'completed': validated['count'] >= validated['target'],
                },
            )
        return len(rows)

    def _restore_settings(self, envelope: Dict):
        if envelope.get('preferences'):
            try:
                validated = validate_or_raise(PreferencesSerializer, envelope['preferences'], partial=True)
            except ValidationError as e:
                raise ValidationError(f"preferences.{e.field}", e.message)
            prefs = PreferencesService.get_or_create(self.user)
            for field, value in validated.items():
                setattr(prefs, field, value)
            prefs.save()

        if envelope.get('focus_settings'):
            try:
                validated = validate_or_raise(FocusSettingsSerializer, envelope['focus_settings'], partial=True)
            except ValidationError as e:
                raise ValidationError(f"focus_settings.{e.field}", e.message)
            settings = FocusService.get_or_create_settings(self.user)
            for field, value in validated.items():
                setattr(settings, field, value)
            settings.save()
