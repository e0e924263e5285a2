"""
Services package for Daily Priority.

Business logic layer containing domain services:

Planning:
- task_service: Task CRUD, status handling and cached listing
- category_service: Per-user task categories
- goal_service: Goal progress and auto-completion
- calendar_service: Calendar events

Habits & reflection:
- habit_service: Habit CRUD, daily completion toggle and streaks
- journal_service: Journal entries with gratitude slots
- focus_service: Focus session recording, statistics and timer settings

Prayers:
- prayer_service: Prayer logging and consistency stats
- prayer_times_service: Aladhan timings, qibla bearing, next prayer
- adhkar_service: Adhkar catalog, daily progress and statistics

Reporting:
- analytics_service: Full analytics report and daily snapshots
- stats_service: Headline user stats
- dashboard_service: Dashboard counters

Utility Services:
- preferences_service: User settings
- export_service: Full JSON data export
- import_service: Restore an export into the current account
"""

# Explicit imports for convenience
from .task_service import TaskService
from .category_service import CategoryService
from .goal_service import GoalService
from .calendar_service import CalendarService
from .habit_service import HabitService
from .journal_service import JournalService
from .focus_service import FocusService
from .prayer_service import PrayerService
from .adhkar_service import AdhkarService
from .analytics_service import AnalyticsService
from .stats_service import StatsService
from .dashboard_service import DashboardService
from .preferences_service import PreferencesService
from .export_service import ExportService
from .import_service import ImportService

__all__ = [
    'TaskService',
    'CategoryService',
    'GoalService',
    'CalendarService',
    'HabitService',
    'JournalService',
    'FocusService',
    'PrayerService',
    'AdhkarService',
    'AnalyticsService',
    'StatsService',
    'DashboardService',
    'PreferencesService',
    'ExportService',
    'ImportService',
]
