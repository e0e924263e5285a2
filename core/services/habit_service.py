"""
Habit Service

Habits, their per-day completions and the streaks derived from them.
"""
import logging
from typing import Dict, List

from django.db import transaction

from core.models import Habit, HabitCompletion
from core.exceptions import ResourceNotFoundError
from core.helpers.metric_helpers import consecutive_day_streak, longest_run
from core.serializers import HabitSerializer, HabitCompletionSerializer, validate_or_raise
from core.utils.constants import HABIT_RECENT_COMPLETIONS, HABIT_STREAK_LOOKBACK
from core.utils.logging_utils import log_with_context
from core.utils.time_utils import today as local_today

logger = logging.getLogger(__name__)


def serialize_completion(completion: HabitCompletion) -> Dict:
    return {
        'id': completion.id,
        'date': completion.date.isoformat(),
        'note': completion.note,
    }


def serialize_habit(habit: Habit, completions=None) -> Dict:
    data = {
        'id': habit.id,
        'title': habit.title,
        'description': habit.description,
        'frequency': habit.frequency,
        'target_days': habit.target_days,
        'streak': habit.streak,
        'longest_streak': habit.longest_streak,
        'created_at': habit.created_at.isoformat() if habit.created_at else None,
    }
    if completions is not None:
        data['completions'] = [serialize_completion(c) for c in completions]
    return data


class HabitService:
    """Manage habits and derive their streaks from completions."""

    def _get_owned_habit(self, user, habit_id: str) -> Habit:
        try:
            return Habit.objects.get(id=habit_id, user=user)
        except Habit.DoesNotExist:
            raise ResourceNotFoundError('Habit', habit_id)

    def list_habits(self, user) -> List[Dict]:
        """
        Habits newest first, each with its 30 most recent completions.

        current_streak counts back from today with no grace day: a habit not
        yet done today shows 0. longest_streak never drops below the stored
        value.
        """
        today = local_today()
        habits = Habit.objects.filter(user=user).prefetch_related('completions')

        result = []
        for habit in habits:
            recent = sorted(habit.completions.all(), key=lambda c: c.date, reverse=True)
            recent = recent[:HABIT_RECENT_COMPLETIONS]

            current = consecutive_day_streak(
                [c.date for c in recent], today, max_days=HABIT_STREAK_LOOKBACK
            )

            data = serialize_habit(habit, recent)
            data['current_streak'] = current
            data['longest_streak'] = max(habit.longest_streak, current)
            result.append(data)

        return result

    def create_habit(self, user, data: Dict) -> Dict:
        validated = validate_or_raise(HabitSerializer, data)
        habit = Habit.objects.create(user=user, **validated)
        log_with_context('info', 'Habit created', user_id=user.id, habit_id=habit.id)
        return serialize_habit(habit, [])

    def update_habit(self, user, habit_id: str, data: Dict) -> Dict:
        habit = self._get_owned_habit(user, habit_id)
        validated = validate_or_raise(HabitSerializer, data, partial=True)

        for field, value in validated.items():
            setattr(habit, field, value)
        habit.save()

        return serialize_habit(habit)

    def delete_habit(self, user, habit_id: str) -> Dict:
        habit = self._get_owned_habit(user, habit_id)
        info = {'id': habit.id, 'title': habit.title}
        # Completions go with it (on_delete=CASCADE)
        habit.delete()
        return info

    @transaction.atomic
    def toggle_completion(self, user, habit_id: str, data: Dict) -> Dict:
        """
        Flip the completion for a date (default today).

        Returns:
            {'completed': False} when an existing completion was removed,
            {'completed': True, 'completion': {...}} when one was created.
            Both carry the habit's recomputed streaks.
        """
        habit = self._get_owned_habit(user, habit_id)
        validated = validate_or_raise(HabitCompletionSerializer, data)
        day = validated.get('date') or local_today()

        existing = HabitCompletion.objects.filter(habit=habit, date=day).first()
        if existing:
            existing.delete()
            result = {'completed': False}
        else:
            completion = HabitCompletion.objects.create(
                habit=habit, date=day, note=validated.get('note')
            )
            result = {'completed': True, 'completion': serialize_completion(completion)}

        self.refresh_streaks(habit)
        result['streak'] = habit.streak
        result['longest_streak'] = habit.longest_streak

        log_with_context('info', 'Habit completion toggled', user_id=user.id,
                         habit_id=habit.id, date=day.isoformat(), completed=result['completed'])
        return result

    def refresh_streaks(self, habit: Habit):
        days = list(habit.completions.values_list('date', flat=True))
        habit.streak = consecutive_day_streak(days, local_today(), max_days=HABIT_STREAK_LOOKBACK)
        habit.longest_streak = max(habit.longest_streak, longest_run(days), habit.streak)
        habit.save(update_fields=['streak', 'longest_streak', 'updated_at'])
