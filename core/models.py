from django.db import models
from django.utils import timezone
from simple_history.models import HistoricalRecords
import uuid

from core.utils.constants import DEFAULT_CATEGORY_COLOR, DEFAULT_MOOD, DEFAULT_TARGET_DAYS


def generate_id():
    return str(uuid.uuid4())


class UserPreferences(models.Model):
    """Per-user settings for location, prayer reminders and display"""

    user = models.OneToOneField('auth.User', on_delete=models.CASCADE, related_name='preferences')
    timezone = models.CharField(max_length=64, default='UTC')
    location = models.CharField(max_length=200, blank=True, default='')
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)
    show_hijri_date = models.BooleanField(default=True)
    prayer_reminder_minutes = models.IntegerField(
        default=10,
        help_text="Minutes before a prayer to send a reminder (0-120)"
    )
    ramadan_mode = models.BooleanField(default=False)
    language = models.CharField(max_length=10, default='en')
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'user_preferences'

    def __str__(self):
        return f"Preferences for {self.user}"


class Category(models.Model):
    """User-defined task category (e.g., Work, Family)"""

    id = models.CharField(max_length=36, primary_key=True, default=generate_id, editable=False)
    user = models.ForeignKey('auth.User', on_delete=models.CASCADE, related_name='categories')
    name = models.CharField(max_length=100)
    color = models.CharField(max_length=7, default=DEFAULT_CATEGORY_COLOR)
    icon = models.CharField(max_length=50, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'categories'
        ordering = ['name']
        unique_together = [['user', 'name']]

    def __str__(self):
        return self.name


class Goal(models.Model):
    """Measurable goal with numeric progress toward a target"""

    CATEGORY_CHOICES = [
        ('IBADAH', 'Ibadah'),
        ('KNOWLEDGE', 'Knowledge'),
        ('FAMILY', 'Family'),
        ('WORK', 'Work'),
        ('HEALTH', 'Health'),
        ('COMMUNITY', 'Community'),
        ('PERSONAL', 'Personal'),
    ]

    id = models.CharField(max_length=36, primary_key=True, default=generate_id, editable=False)
    user = models.ForeignKey('auth.User', on_delete=models.CASCADE, related_name='goals')
    title = models.CharField(max_length=200)
    description = models.TextField(null=True, blank=True)
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES)
    target = models.IntegerField()
    progress = models.IntegerField(default=0)
    deadline = models.DateTimeField(null=True, blank=True)
    completed = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    history = HistoricalRecords()

    class Meta:
        db_table = 'goals'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'category']),
            models.Index(fields=['user', 'completed']),
        ]

    def __str__(self):
        return f"{self.title} ({self.progress}/{self.target})"


class Task(models.Model):
    """A single to-do item, optionally filed under a category and goal"""

    STATUS_CHOICES = [
        ('TODO', 'To Do'),
        ('IN_PROGRESS', 'In Progress'),
        ('COMPLETED', 'Completed'),
        ('CANCELLED', 'Cancelled'),
    ]

    PRIORITY_CHOICES = [
        ('LOW', 'Low'),
        ('MEDIUM', 'Medium'),
        ('HIGH', 'High'),
        ('URGENT', 'Urgent'),
    ]

    ENERGY_CHOICES = [
        ('LOW', 'Low'),
        ('MEDIUM', 'Medium'),
        ('HIGH', 'High'),
    ]

    id = models.CharField(max_length=36, primary_key=True, default=generate_id, editable=False)
    user = models.ForeignKey('auth.User', on_delete=models.CASCADE, related_name='tasks')
    title = models.CharField(max_length=300)
    description = models.TextField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='TODO')
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default='MEDIUM')

    # Eisenhower matrix flags
    urgent = models.BooleanField(default=False)
    important = models.BooleanField(default=False)

    estimated_time = models.IntegerField(
        null=True, blank=True,
        help_text="Estimated minutes (1-1440)"
    )
    energy_level = models.CharField(max_length=10, choices=ENERGY_CHOICES, null=True, blank=True)
    due_date = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    ai_suggested = models.BooleanField(default=False)
    ai_reason = models.TextField(null=True, blank=True)

    category = models.ForeignKey(
        Category, on_delete=models.SET_NULL, null=True, blank=True, related_name='tasks'
    )
    goal = models.ForeignKey(
        Goal, on_delete=models.SET_NULL, null=True, blank=True, related_name='tasks'
    )

    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    # Audit history - tracks all changes with user attribution
    history = HistoricalRecords()

    class Meta:
        db_table = 'tasks'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'status']),
            models.Index(fields=['user', 'completed_at']),
            models.Index(fields=['user', 'due_date']),
            models.Index(fields=['user', '-created_at']),
        ]

    def __str__(self):
        return f"{self.title} ({self.status})"


class Subtask(models.Model):
    id = models.CharField(max_length=36, primary_key=True, default=generate_id, editable=False)
    task = models.ForeignKey(Task, on_delete=models.CASCADE, related_name='subtasks')
    title = models.CharField(max_length=300)
    completed = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'subtasks'
        ordering = ['created_at']

    def __str__(self):
        return self.title


class Habit(models.Model):
    """Recurring behavior tracked by daily completions"""

    FREQUENCY_CHOICES = [
        ('DAILY', 'Daily'),
        ('WEEKLY', 'Weekly'),
        ('CUSTOM', 'Custom'),
    ]

    id = models.CharField(max_length=36, primary_key=True, default=generate_id, editable=False)
    user = models.ForeignKey('auth.User', on_delete=models.CASCADE, related_name='habits')
    title = models.CharField(max_length=200)
    description = models.TextField(null=True, blank=True)
    frequency = models.CharField(max_length=10, choices=FREQUENCY_CHOICES, default='DAILY')
    target_days = models.IntegerField(default=DEFAULT_TARGET_DAYS)
    streak = models.IntegerField(default=0)
    longest_streak = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    history = HistoricalRecords()

    class Meta:
        db_table = 'habits'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', '-created_at']),
        ]

    def __str__(self):
        return f"{self.title} ({self.frequency})"


class HabitCompletion(models.Model):
    id = models.CharField(max_length=36, primary_key=True, default=generate_id, editable=False)
    habit = models.ForeignKey(Habit, on_delete=models.CASCADE, related_name='completions')
    date = models.DateField()
    note = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'habit_completions'
        ordering = ['-date']
        unique_together = [['habit', 'date']]

    def __str__(self):
        return f"{self.habit.title} on {self.date}"


class JournalEntry(models.Model):
    """Daily journal: three gratitude slots, a reflection and a mood"""

    id = models.CharField(max_length=36, primary_key=True, default=generate_id, editable=False)
    user = models.ForeignKey('auth.User', on_delete=models.CASCADE, related_name='journal_entries')
    date = models.DateField(default=timezone.localdate)
    gratitude1 = models.TextField(null=True, blank=True)
    gratitude2 = models.TextField(null=True, blank=True)
    gratitude3 = models.TextField(null=True, blank=True)
    reflection = models.TextField(null=True, blank=True)
    mood = models.CharField(max_length=30, default=DEFAULT_MOOD)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    history = HistoricalRecords()

    class Meta:
        db_table = 'journal_entries'
        ordering = ['-date', '-created_at']
        indexes = [
            models.Index(fields=['user', '-date']),
        ]

    def __str__(self):
        return f"Journal {self.date}"

    @property
    def gratitude(self):
        return [g for g in (self.gratitude1, self.gratitude2, self.gratitude3) if g]


class PrayerTracking(models.Model):
    """One row per (user, day, prayer). completed_at is null when not prayed."""

    PRAYER_CHOICES = [
        ('FAJR', 'Fajr'),
        ('DHUHR', 'Dhuhr'),
        ('ASR', 'Asr'),
        ('MAGHRIB', 'Maghrib'),
        ('ISHA', 'Isha'),
    ]

    id = models.CharField(max_length=36, primary_key=True, default=generate_id, editable=False)
    user = models.ForeignKey('auth.User', on_delete=models.CASCADE, related_name='prayer_logs')
    date = models.DateField()
    prayer_name = models.CharField(max_length=10, choices=PRAYER_CHOICES)
    completed_at = models.DateTimeField(null=True, blank=True)
    on_time = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'prayer_tracking'
        ordering = ['-date']
        unique_together = [['user', 'date', 'prayer_name']]
        indexes = [
            models.Index(fields=['user', 'date']),
        ]

    def __str__(self):
        return f"{self.prayer_name} on {self.date}"

    @property
    def completed(self):
        return self.completed_at is not None


class AdhkarProgress(models.Model):
    """Repetitions of one catalog dhikr on one day"""

    CATEGORY_CHOICES = [
        ('morning', 'Morning'),
        ('evening', 'Evening'),
        ('after_prayer', 'After Prayer'),
        ('general', 'General'),
    ]

    id = models.CharField(max_length=36, primary_key=True, default=generate_id, editable=False)
    user = models.ForeignKey('auth.User', on_delete=models.CASCADE, related_name='adhkar_progress')
    adhkar_id = models.CharField(max_length=50)
    adhkar_name = models.CharField(max_length=200)
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES)
    count = models.IntegerField(default=0)
    target = models.IntegerField(default=1)
    date = models.DateField()
    completed = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'adhkar_progress'
        ordering = ['-date', 'adhkar_id']
        unique_together = [['user', 'adhkar_id', 'date']]
        indexes = [
            models.Index(fields=['user', 'date']),
        ]

    def __str__(self):
        return f"{self.adhkar_id} {self.count}/{self.target} on {self.date}"


class FocusSession(models.Model):
    """A finished pomodoro-style session or break"""

    TYPE_CHOICES = [
        ('focus', 'Focus'),
        ('shortBreak', 'Short Break'),
        ('longBreak', 'Long Break'),
    ]

    id = models.CharField(max_length=36, primary_key=True, default=generate_id, editable=False)
    user = models.ForeignKey('auth.User', on_delete=models.CASCADE, related_name='focus_sessions')
    duration = models.IntegerField(help_text="Minutes")
    session_type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='focus')
    task_title = models.CharField(max_length=300, null=True, blank=True)
    completed = models.BooleanField(default=True)
    date = models.DateTimeField(default=timezone.now)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'focus_sessions'
        ordering = ['-date']
        indexes = [
            models.Index(fields=['user', 'date']),
        ]

    def __str__(self):
        return f"{self.session_type} {self.duration}m"


class FocusSettings(models.Model):
    """Per-user focus timer configuration (minutes)"""

    user = models.OneToOneField('auth.User', on_delete=models.CASCADE, related_name='focus_settings')
    focus_duration = models.IntegerField(default=25)
    short_break_duration = models.IntegerField(default=5)
    long_break_duration = models.IntegerField(default=15)
    auto_start_breaks = models.BooleanField(default=False)
    auto_start_focus = models.BooleanField(default=False)
    enable_music = models.BooleanField(default=True)
    music_volume = models.IntegerField(default=50)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'focus_settings'

    def __str__(self):
        return f"Focus settings for {self.user}"


class DailyAnalytics(models.Model):
    """Nightly per-user snapshot of a day's activity"""

    id = models.CharField(max_length=36, primary_key=True, default=generate_id, editable=False)
    user = models.ForeignKey('auth.User', on_delete=models.CASCADE, related_name='daily_analytics')
    date = models.DateField()
    tasks_created = models.IntegerField(default=0)
    tasks_completed = models.IntegerField(default=0)
    focus_time_minutes = models.IntegerField(default=0)
    productivity_score = models.IntegerField(default=0)
    energy_level = models.CharField(max_length=10, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'daily_analytics'
        ordering = ['-date']
        unique_together = [['user', 'date']]

    def __str__(self):
        return f"Analytics {self.date} ({self.productivity_score})"


class CalendarEvent(models.Model):
    id = models.CharField(max_length=36, primary_key=True, default=generate_id, editable=False)
    user = models.ForeignKey('auth.User', on_delete=models.CASCADE, related_name='calendar_events')
    title = models.CharField(max_length=200)
    date = models.DateTimeField()
    event_type = models.CharField(max_length=30, default='general')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'calendar_events'
        ordering = ['date']
        indexes = [
            models.Index(fields=['user', 'date']),
        ]

    def __str__(self):
        return f"{self.title} @ {self.date}"
