# core/utils/constants.py
"""
Central constants file for consistent status values across the application.
Use these constants instead of hardcoded strings to prevent validation errors.
"""

# ============================================
# TASK STATUS VALUES
# ============================================
TASK_STATUS_TODO = "TODO"
TASK_STATUS_IN_PROGRESS = "IN_PROGRESS"
TASK_STATUS_COMPLETED = "COMPLETED"
TASK_STATUS_CANCELLED = "CANCELLED"

TASK_STATUS_CHOICES = [
    TASK_STATUS_TODO,
    TASK_STATUS_IN_PROGRESS,
    TASK_STATUS_COMPLETED,
    TASK_STATUS_CANCELLED
]

TASK_PRIORITY_CHOICES = ["LOW", "MEDIUM", "HIGH", "URGENT"]
ENERGY_LEVEL_CHOICES = ["LOW", "MEDIUM", "HIGH"]

# Estimated time is stored in minutes and clamped to one day
MIN_ESTIMATED_TIME = 1
MAX_ESTIMATED_TIME = 1440

DEFAULT_AVERAGE_TASK_TIME = 35
MINUTES_PER_COMPLETED_TASK = 30

# ============================================
# CATEGORIES
# ============================================
DEFAULT_CATEGORY_COLOR = "#3B82F6"
UNCATEGORIZED_NAME = "Uncategorized"
EMPTY_CATEGORY_NAME = "General"

# ============================================
# HABITS
# ============================================
HABIT_FREQUENCY_CHOICES = ["DAILY", "WEEKLY", "CUSTOM"]
DEFAULT_HABIT_FREQUENCY = "DAILY"
DEFAULT_TARGET_DAYS = 7
HABIT_RECENT_COMPLETIONS = 30

# ============================================
# GOALS
# ============================================
GOAL_CATEGORY_CHOICES = [
    "IBADAH", "KNOWLEDGE", "FAMILY", "WORK", "HEALTH", "COMMUNITY", "PERSONAL"
]

# Report key -> goal category
GOAL_REPORT_GROUPS = {
    'spiritual': 'IBADAH',
    'personal': 'PERSONAL',
    'work': 'WORK',
    'health': 'HEALTH',
}

# ============================================
# JOURNAL
# ============================================
DEFAULT_MOOD = "good"
GRATITUDE_SLOTS = 3

# ============================================
# PRAYERS
# ============================================
PRAYER_NAMES = ["FAJR", "DHUHR", "ASR", "MAGHRIB", "ISHA"]

# Fallback timetable when the prayer-times service is unreachable
DEFAULT_PRAYER_TIMES = {
    'fajr': '05:30',
    'sunrise': '06:45',
    'dhuhr': '12:30',
    'asr': '15:45',
    'maghrib': '18:15',
    'isha': '19:45',
}

# Order used when looking for the next prayer of the day
PRAYER_SCHEDULE_ORDER = ['fajr', 'dhuhr', 'asr', 'maghrib', 'isha']

KAABA_LATITUDE = 21.4225
KAABA_LONGITUDE = 39.8262

# Aladhan calculation method 2 = ISNA
PRAYER_CALC_METHOD = 2
DEFAULT_PRAYER_STATS_DAYS = 30
PRAYER_DELAY_MINUTES = 5

# ============================================
# FOCUS SESSIONS
# ============================================
FOCUS_SESSION_TYPES = ["focus", "shortBreak", "longBreak"]
MIN_FOCUS_DURATION = 1
MAX_FOCUS_DURATION = 1440

# Timer settings: default and (min, max) minutes
FOCUS_SETTINGS_DEFAULTS = {
    'focus_duration': 25,
    'short_break_duration': 5,
    'long_break_duration': 15,
    'auto_start_breaks': False,
    'auto_start_focus': False,
    'enable_music': True,
    'music_volume': 50,
}
FOCUS_DURATION_RANGE = (1, 120)
SHORT_BREAK_RANGE = (1, 30)
LONG_BREAK_RANGE = (1, 60)
MUSIC_VOLUME_RANGE = (0, 100)

# ============================================
# ADHKAR
# ============================================
ADHKAR_CATEGORIES = ["morning", "evening", "after_prayer", "general"]
ADHKAR_STATS_DAYS = 30
ADHKAR_RECENT_DAYS = 7

# ============================================
# LOOKBACK WINDOWS (days)
# ============================================
ANALYTICS_STREAK_LOOKBACK = 365
STATS_STREAK_LOOKBACK = 30
HABIT_STREAK_LOOKBACK = 30
PATTERN_LOOKBACK = 90

# ============================================
# PAGINATION
# ============================================
DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
# Keeps the row offset inside what the database accepts
MAX_PAGE = 100000

# ============================================
# CACHE TIMEOUTS (seconds)
# ============================================
CACHE_TIMEOUTS = {
    'tasks': 300,
    'stats': 120,
    'analytics': 300,
    'focus': 60,
}

# ============================================
# INSIGHT THRESHOLDS
# ============================================
PRAYER_CHAMPION_THRESHOLD = 90
STRONG_STREAK_THRESHOLD = 7
HIGH_COMPLETION_THRESHOLD = 80
LOW_COMPLETION_THRESHOLD = 50
PATTERN_MIN_SAMPLE = 5

# ============================================
# PREFERENCES
# ============================================
MAX_PRAYER_REMINDER_MINUTES = 120
