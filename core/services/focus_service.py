"""
Focus Session Service

Records finished focus sessions and breaks, and summarizes them per day,
week, month and all time. Also keeps each user's timer settings.
"""
from datetime import timedelta
from typing import Dict

from django.db.models import Count, Sum
from django.utils import timezone

from core.models import FocusSession, FocusSettings
from core.exceptions import ValidationError
from core.helpers.cache_helpers import get_user_cached, set_user_cached, invalidate_user_cache
from core.helpers.metric_helpers import consecutive_day_streak, longest_run, round_half_up
from core.serializers import FocusSessionSerializer, FocusSettingsSerializer, validate_or_raise
from core.utils.logging_utils import log_with_context
from core.utils.time_utils import local_date, start_of_day, last_n_days, today as local_today


def serialize_session(session: FocusSession) -> Dict:
    return {
        'id': session.id,
        'duration': session.duration,
        'session_type': session.session_type,
        'task_title': session.task_title,
        'completed': session.completed,
        'date': session.date.isoformat(),
    }


def serialize_focus_settings(settings: FocusSettings) -> Dict:
    return {
        'focus_duration': settings.focus_duration,
        'short_break_duration': settings.short_break_duration,
        'long_break_duration': settings.long_break_duration,
        'auto_start_breaks': settings.auto_start_breaks,
        'auto_start_focus': settings.auto_start_focus,
        'enable_music': settings.enable_music,
        'music_volume': settings.music_volume,
    }


def _daily_breakdown(sessions, days, today):
    buckets = {day: {'sessions': 0, 'focus_time': 0} for day in last_n_days(days, today)}
    for session in sessions:
        bucket = buckets.get(local_date(session.date))
        if bucket is not None:
            bucket['sessions'] += 1
            bucket['focus_time'] += session.duration
    return [
        {'date': day.isoformat(), 'sessions': b['sessions'], 'focus_time': b['focus_time']}
        for day, b in buckets.items()
    ]


class FocusService:

    def record_session(self, user, data: Dict) -> Dict:
        """
        Raises:
            ValidationError: Duration outside 1..1440, unknown session type,
                or a completion time in the future
        """
        validated = validate_or_raise(FocusSessionSerializer, data)

        completed_at = validated.get('completed_at') or timezone.now()
        if completed_at > timezone.now():
            raise ValidationError('completed_at', 'Session cannot be in the future')

        task_title = (validated.get('task_title') or '').strip() or None
        session = FocusSession.objects.create(
            user=user,
            duration=validated['duration'],
            session_type=validated['session_type'],
            task_title=task_title,
            completed=True,
            date=completed_at,
        )

        invalidate_user_cache(user.id, 'focus')
        log_with_context('info', 'Focus session recorded', user_id=user.id,
                         session_type=session.session_type, duration=session.duration)
        return serialize_session(session)

    def get_stats(self, user) -> Dict:
        cached = get_user_cached('focus', user.id)
        if cached is not None:
            return cached

        today = local_today()
        completed = FocusSession.objects.filter(user=user, completed=True)

        # Month window covers every shorter window
        month_start = start_of_day(today - timedelta(days=30))
        week_start = start_of_day(today - timedelta(days=7))
        today_start = start_of_day(today)
        recent = list(completed.filter(date__gte=month_start))

        today_sessions = [s for s in recent if s.date >= today_start]
        week_sessions = [s for s in recent if s.date >= week_start]

        week_time = sum(s.duration for s in week_sessions)
        month_time = sum(s.duration for s in recent)

        totals = completed.aggregate(total_time=Sum('duration'), total_sessions=Count('id'))
        session_days = {local_date(d) for d in completed.values_list('date', flat=True)}

        type_breakdown = [
            {'type': row['session_type'], 'count': row['count'], 'total_time': row['total_time'] or 0}
            for row in completed.values('session_type')
            .annotate(count=Count('id'), total_time=Sum('duration'))
            .order_by('session_type')
        ]

        stats = {
            'today': {
                'focus_time': sum(s.duration for s in today_sessions),
                'sessions': len(today_sessions),
            },
            'week': {
                'focus_time': week_time,
                'sessions': len(week_sessions),
                'avg_daily_focus_time': round_half_up(week_time / 7) if week_sessions else 0,
                'avg_daily_sessions': round_half_up(len(week_sessions) / 7, 1),
            },
            'month': {
                'focus_time': month_time,
                'sessions': len(recent),
                'avg_daily_focus_time': round_half_up(month_time / 30) if recent else 0,
                'avg_daily_sessions': round_half_up(len(recent) / 30, 1),
            },
            'all_time': {
                'total_sessions': totals['total_sessions'] or 0,
                'total_focus_time': totals['total_time'] or 0,
                'current_streak': consecutive_day_streak(
                    session_days, today, max_days=len(session_days) + 1
                ),
                'longest_streak': longest_run(session_days),
            },
            'last_7_days': _daily_breakdown(recent, 7, today),
            'last_30_days': _daily_breakdown(recent, 30, today),
            'type_breakdown': type_breakdown,
        }

        set_user_cached('focus', user.id, stats)
        return stats

    @staticmethod
    def get_or_create_settings(user) -> FocusSettings:
        settings, _ = FocusSettings.objects.get_or_create(user=user)
        return settings

    def get_settings(self, user) -> Dict:
        return serialize_focus_settings(self.get_or_create_settings(user))

    def update_settings(self, user, data: Dict) -> Dict:
        """
        Partial update; fields not sent keep their value.

        Raises:
            ValidationError: Nothing recognizable sent, or a duration or
                volume outside its range
        """
        validated = validate_or_raise(FocusSettingsSerializer, data, partial=True)
        if not validated:
            raise ValidationError('settings', 'No settings provided')

        settings = self.get_or_create_settings(user)
        for field, value in validated.items():
            setattr(settings, field, value)
        settings.save()

        log_with_context('info', 'Focus settings updated', user_id=user.id, fields=sorted(validated))
        return serialize_focus_settings(settings)
