"""
Scheduler integration for Daily Priority.

Handles periodic background tasks using APScheduler:
- Nightly daily-analytics snapshot for every active user
"""
from apscheduler.schedulers.background import BackgroundScheduler
from django.core.cache import cache
from functools import wraps
from datetime import timedelta
import atexit
import logging

from django.utils import timezone

logger = logging.getLogger(__name__)


# ============================================================================
# JOB LOCKING
# ============================================================================

def with_lock(lock_name: str, lock_timeout: int = 3600):
    """
    Decorator to prevent duplicate job execution using cache-based locking.

    Args:
        lock_name: Unique name for the lock
        lock_timeout: Lock timeout in seconds (default: 1 hour)
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            lock_key = f"scheduler_lock:{lock_name}"

            if not cache.add(lock_key, "locked", lock_timeout):
                logger.warning(f"Job '{lock_name}' is already running, skipping...")
                return None

            try:
                return func(*args, **kwargs)
            finally:
                cache.delete(lock_key)

        return wrapper
    return decorator


# ============================================================================
# JOBS
# ============================================================================

@with_lock('nightly_analytics_snapshot', lock_timeout=3600)
def snapshot_yesterday():
    """Write DailyAnalytics rows for the day that just ended."""
    from core.services.analytics_service import AnalyticsService

    day = timezone.localdate() - timedelta(days=1)
    started = timezone.now()
    count = AnalyticsService.snapshot_all(day)
    elapsed = (timezone.now() - started).total_seconds()
    logger.info(f"Analytics snapshot for {day.isoformat()}: {count} users, {elapsed:.1f}s elapsed")
    return count


def start_scheduler():
    """
    Start the background scheduler.

    Schedules:
        - Daily analytics snapshot at 00:15
    """
    scheduler = BackgroundScheduler()

    scheduler.add_job(
        snapshot_yesterday,
        'cron',
        hour=0,
        minute=15,
        id='nightly_analytics_snapshot',
        replace_existing=True,
        misfire_grace_time=3600  # 1 hour grace period
    )

    scheduler.start()
    logger.info("Scheduler started with 1 locked job: nightly analytics snapshot")

    atexit.register(lambda: scheduler.shutdown())
    return scheduler
