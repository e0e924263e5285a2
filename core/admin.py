from django.contrib import admin
from simple_history.admin import SimpleHistoryAdmin

from core.models import (
    UserPreferences, Category, Task, Subtask, Habit, HabitCompletion,
    JournalEntry, Goal, PrayerTracking, AdhkarProgress, FocusSession, FocusSettings,
    DailyAnalytics, CalendarEvent,
)


class OwnedModelAdmin(admin.ModelAdmin):
    """Staff users only see their own rows unless they are superusers"""

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        if request.user.is_superuser:
            return qs
        return qs.filter(user=request.user)

    def save_model(self, request, obj, form, change):
        """Auto-assign user on create if not set"""
        if not change and not obj.user_id:
            obj.user = request.user
        super().save_model(request, obj, form, change)


class SubtaskInline(admin.TabularInline):
    model = Subtask
    extra = 0


@admin.register(Task)
class TaskAdmin(OwnedModelAdmin, SimpleHistoryAdmin):
    list_display = ['title', 'user', 'status', 'urgent', 'important', 'due_date', 'completed_at']
    list_filter = ['status', 'priority', 'urgent', 'important']
    search_fields = ['title', 'description']
    readonly_fields = ['id', 'created_at', 'updated_at']
    inlines = [SubtaskInline]

    fieldsets = (
        ('Basic Information', {
            'fields': ('id', 'user', 'title', 'description', 'category', 'goal')
        }),
        ('Planning', {
            'fields': ('status', 'priority', 'urgent', 'important', 'estimated_time',
                       'energy_level', 'due_date', 'completed_at')
        }),
        ('Suggestions', {
            'fields': ('ai_suggested', 'ai_reason'),
            'classes': ('collapse',)
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )


@admin.register(Category)
class CategoryAdmin(OwnedModelAdmin):
    list_display = ['name', 'user', 'color']
    search_fields = ['name']


class HabitCompletionInline(admin.TabularInline):
    model = HabitCompletion
    extra = 0


@admin.register(Habit)
class HabitAdmin(OwnedModelAdmin, SimpleHistoryAdmin):
    list_display = ['title', 'user', 'frequency', 'streak', 'longest_streak']
    list_filter = ['frequency']
    search_fields = ['title']
    inlines = [HabitCompletionInline]


@admin.register(JournalEntry)
class JournalEntryAdmin(OwnedModelAdmin, SimpleHistoryAdmin):
    list_display = ['date', 'user', 'mood']
    list_filter = ['mood']
    date_hierarchy = 'date'


@admin.register(Goal)
class GoalAdmin(OwnedModelAdmin, SimpleHistoryAdmin):
    list_display = ['title', 'user', 'category', 'progress', 'target', 'completed']
    list_filter = ['category', 'completed']
    search_fields = ['title']


@admin.register(PrayerTracking)
class PrayerTrackingAdmin(OwnedModelAdmin):
    list_display = ['date', 'prayer_name', 'user', 'completed_at', 'on_time']
    list_filter = ['prayer_name', 'on_time']
    date_hierarchy = 'date'


@admin.register(AdhkarProgress)
class AdhkarProgressAdmin(OwnedModelAdmin):
    list_display = ['date', 'adhkar_id', 'user', 'category', 'count', 'target', 'completed']
    list_filter = ['category', 'completed']
    date_hierarchy = 'date'


@admin.register(FocusSession)
class FocusSessionAdmin(OwnedModelAdmin):
    list_display = ['date', 'user', 'session_type', 'duration', 'completed']
    list_filter = ['session_type', 'completed']


@admin.register(DailyAnalytics)
class DailyAnalyticsAdmin(OwnedModelAdmin):
    list_display = ['date', 'user', 'tasks_created', 'tasks_completed',
                    'focus_time_minutes', 'productivity_score']
    date_hierarchy = 'date'


@admin.register(CalendarEvent)
class CalendarEventAdmin(OwnedModelAdmin):
    list_display = ['title', 'user', 'date', 'event_type']


@admin.register(UserPreferences)
class UserPreferencesAdmin(OwnedModelAdmin):
    list_display = ['user', 'timezone', 'location', 'prayer_reminder_minutes']


@admin.register(FocusSettings)
class FocusSettingsAdmin(OwnedModelAdmin):
    list_display = ['user', 'focus_duration', 'short_break_duration', 'long_break_duration', 'music_volume']
