"""
Input Validation Serializers

Provides validation for user input using Django REST Framework serializers.
Ensures data integrity before it reaches the database.
"""
import zoneinfo

from rest_framework import serializers

from core.exceptions import ValidationError as AppValidationError
from core.utils.constants import (
    HABIT_FREQUENCY_CHOICES,
    DEFAULT_HABIT_FREQUENCY,
    DEFAULT_TARGET_DAYS,
    GOAL_CATEGORY_CHOICES,
    PRAYER_NAMES,
    FOCUS_SESSION_TYPES,
    MIN_FOCUS_DURATION,
    MAX_FOCUS_DURATION,
    DEFAULT_CATEGORY_COLOR,
    MAX_PRAYER_REMINDER_MINUTES,
    ADHKAR_CATEGORIES,
    FOCUS_DURATION_RANGE,
    SHORT_BREAK_RANGE,
    LONG_BREAK_RANGE,
    MUSIC_VOLUME_RANGE,
    TASK_STATUS_CHOICES,
    TASK_STATUS_TODO,
    TASK_PRIORITY_CHOICES,
    ENERGY_LEVEL_CHOICES,
    MIN_ESTIMATED_TIME,
    MAX_ESTIMATED_TIME,
)


def validate_or_raise(serializer_class, data, partial=False):
    """
    Run a serializer and return its validated data.

    Raises:
        ValidationError: naming the first offending field
    """
    serializer = serializer_class(data=data, partial=partial)
    if not serializer.is_valid():
        field, messages = next(iter(serializer.errors.items()))
        message = messages[0] if isinstance(messages, list) else messages
        raise AppValidationError(field, str(message))
    return serializer.validated_data


class UpperCaseChoiceField(serializers.ChoiceField):
    """Choice field that accepts any casing ('daily' -> 'DAILY')."""

    def to_internal_value(self, data):
        if isinstance(data, str):
            data = data.strip().upper()
        return super().to_internal_value(data)


class CategoryCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    color = serializers.RegexField(
        r'^#[0-9A-Fa-f]{6}$',
        required=False,
        default=DEFAULT_CATEGORY_COLOR,
        error_messages={'invalid': 'Color must be a hex value like #3B82F6'}
    )
    icon = serializers.CharField(max_length=50, required=False, allow_blank=True, default='')

    def validate_name(self, value):
        if not value.strip():
            raise serializers.ValidationError("Name is required")
        return value.strip()


class HabitSerializer(serializers.Serializer):
    """Validate habit create/update data"""

    title = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    frequency = UpperCaseChoiceField(
        choices=HABIT_FREQUENCY_CHOICES,
        default=DEFAULT_HABIT_FREQUENCY
    )
    target_days = serializers.IntegerField(min_value=1, max_value=7, default=DEFAULT_TARGET_DAYS)

    def validate_title(self, value):
        if not value.strip():
            raise serializers.ValidationError("Title is required")
        return value.strip()


class HabitCompletionSerializer(serializers.Serializer):
    date = serializers.DateField(required=False, allow_null=True)
    note = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class GoalCreateSerializer(serializers.Serializer):
    """Validate goal creation data"""

    title = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    category = UpperCaseChoiceField(choices=GOAL_CATEGORY_CHOICES)
    target = serializers.IntegerField(min_value=1)
    deadline = serializers.DateTimeField(required=False, allow_null=True)

    def validate_title(self, value):
        if not value.strip():
            raise serializers.ValidationError("Title is required")
        return value.strip()


class GoalUpdateSerializer(GoalCreateSerializer):
    progress = serializers.IntegerField(min_value=0, required=False)
    completed = serializers.BooleanField(required=False)


class JournalEntrySerializer(serializers.Serializer):
    """Validate journal create/update data (all fields optional)"""

    date = serializers.DateField(
        required=False,
        allow_null=True,
        error_messages={'invalid': 'Date must be in YYYY-MM-DD format'}
    )
    gratitude = serializers.ListField(
        child=serializers.CharField(allow_blank=True, allow_null=True),
        required=False,
        allow_null=True,
        error_messages={'not_a_list': 'Gratitude must be a list'}
    )
    reflection = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    mood = serializers.CharField(max_length=30, required=False, allow_blank=True, allow_null=True)


class PrayerTrackSerializer(serializers.Serializer):
    date = serializers.DateField()
    prayer_name = UpperCaseChoiceField(choices=PRAYER_NAMES)
    completed = serializers.BooleanField(default=False)
    on_time = serializers.BooleanField(default=False)


class FocusSessionSerializer(serializers.Serializer):
    """Validate a finished focus session"""

    duration = serializers.IntegerField(
        min_value=MIN_FOCUS_DURATION,
        max_value=MAX_FOCUS_DURATION,
        error_messages={
            'min_value': 'Duration must be between 1 and 1440 minutes',
            'max_value': 'Duration must be between 1 and 1440 minutes',
        }
    )
    session_type = serializers.ChoiceField(choices=FOCUS_SESSION_TYPES, default='focus')
    task_title = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=300)
    completed_at = serializers.DateTimeField(required=False, allow_null=True)


class AdhkarProgressSerializer(serializers.Serializer):
    adhkar_id = serializers.CharField(max_length=50)
    adhkar_name = serializers.CharField(max_length=200, required=False, allow_blank=True, allow_null=True)
    category = serializers.ChoiceField(choices=ADHKAR_CATEGORIES)
    count = serializers.IntegerField(min_value=0)
    target = serializers.IntegerField(min_value=1)


def _bounded_int(bounds):
    low, high = bounds
    return serializers.IntegerField(
        min_value=low,
        max_value=high,
        required=False,
        error_messages={
            'min_value': f'Must be between {low} and {high}',
            'max_value': f'Must be between {low} and {high}',
        }
    )


class FocusSettingsSerializer(serializers.Serializer):
    """Validate focus timer settings (all fields optional)"""

    focus_duration = _bounded_int(FOCUS_DURATION_RANGE)
    short_break_duration = _bounded_int(SHORT_BREAK_RANGE)
    long_break_duration = _bounded_int(LONG_BREAK_RANGE)
    auto_start_breaks = serializers.BooleanField(required=False)
    auto_start_focus = serializers.BooleanField(required=False)
    enable_music = serializers.BooleanField(required=False)
    music_volume = _bounded_int(MUSIC_VOLUME_RANGE)


class CalendarEventSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200)
    date = serializers.DateTimeField()
    event_type = serializers.CharField(max_length=30, required=False, default='general')

    def validate_title(self, value):
        if not value.strip():
            raise serializers.ValidationError("Title is required")
        return value.strip()


class PreferencesSerializer(serializers.Serializer):
    """Validate user preference updates (all fields optional)"""

    timezone = serializers.CharField(max_length=64, required=False)
    location = serializers.CharField(max_length=200, required=False, allow_blank=True)
    latitude = serializers.FloatField(min_value=-90, max_value=90, required=False, allow_null=True)
    longitude = serializers.FloatField(min_value=-180, max_value=180, required=False, allow_null=True)
    show_hijri_date = serializers.BooleanField(required=False)
    prayer_reminder_minutes = serializers.IntegerField(
        min_value=0, max_value=MAX_PRAYER_REMINDER_MINUTES, required=False
    )
    ramadan_mode = serializers.BooleanField(required=False)
    language = serializers.CharField(max_length=10, required=False)

    def validate_timezone(self, value):
        try:
            zoneinfo.ZoneInfo(value)
        except (zoneinfo.ZoneInfoNotFoundError, ValueError):
            raise serializers.ValidationError(f"Unknown timezone '{value}'")
        return value


# ============================================================================
# BACKUP IMPORT
# ============================================================================

class BackupSerializer(serializers.Serializer):
    """Envelope of an exported backup; ``data`` is validated section by section."""

    version = serializers.CharField(max_length=20)
    exported_at = serializers.DateTimeField()
    user = serializers.DictField()
    preferences = serializers.DictField(required=False, allow_null=True)
    focus_settings = serializers.DictField(required=False, allow_null=True)


class BackupDataSerializer(serializers.Serializer):
    categories = serializers.ListField(child=serializers.DictField(), required=False, default=list)
    goals = serializers.ListField(child=serializers.DictField(), required=False, default=list)
    tasks = serializers.ListField(child=serializers.DictField(), required=False, default=list)
    habits = serializers.ListField(child=serializers.DictField(), required=False, default=list)
    journal = serializers.ListField(child=serializers.DictField(), required=False, default=list)
    prayer_logs = serializers.ListField(child=serializers.DictField(), required=False, default=list)
    focus_sessions = serializers.ListField(child=serializers.DictField(), required=False, default=list)
    calendar_events = serializers.ListField(child=serializers.DictField(), required=False, default=list)
    adhkar_progress = serializers.ListField(child=serializers.DictField(), required=False, default=list)


class TaskBackupSerializer(serializers.Serializer):
    """A task as it appears in an export"""

    title = serializers.CharField(max_length=300)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    status = UpperCaseChoiceField(choices=TASK_STATUS_CHOICES, default=TASK_STATUS_TODO)
    priority = UpperCaseChoiceField(choices=TASK_PRIORITY_CHOICES, default='MEDIUM')
    urgent = serializers.BooleanField(default=False)
    important = serializers.BooleanField(default=False)
    estimated_time = serializers.IntegerField(
        min_value=MIN_ESTIMATED_TIME, max_value=MAX_ESTIMATED_TIME, required=False, allow_null=True
    )
    energy_level = UpperCaseChoiceField(choices=ENERGY_LEVEL_CHOICES, required=False, allow_null=True)
    due_date = serializers.DateTimeField(required=False, allow_null=True)
    completed_at = serializers.DateTimeField(required=False, allow_null=True)
    created_at = serializers.DateTimeField(required=False, allow_null=True)
    category = serializers.DictField(required=False, allow_null=True)
    goal_id = serializers.CharField(required=False, allow_null=True)
    subtasks = serializers.ListField(child=serializers.DictField(), required=False, default=list)

    def validate_title(self, value):
        if not value.strip():
            raise serializers.ValidationError("Title is required")
        return value.strip()


class HabitBackupSerializer(HabitSerializer):
    completions = HabitCompletionSerializer(many=True, required=False, default=list)


class AdhkarBackupSerializer(AdhkarProgressSerializer):
    date = serializers.DateField()
