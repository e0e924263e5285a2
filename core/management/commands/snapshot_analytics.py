"""
Write DailyAnalytics snapshots on demand.

    python manage.py snapshot_analytics              # yesterday
    python manage.py snapshot_analytics --date 2024-03-01
"""
from datetime import timedelta

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from core.services.analytics_service import AnalyticsService
from core.utils.time_utils import parse_date


class Command(BaseCommand):
    help = "Snapshot per-user daily analytics for one day (defaults to yesterday)"

    def add_arguments(self, parser):
        parser.add_argument('--date', dest='day', help='Day to snapshot, YYYY-MM-DD')

    def handle(self, *args, **options):
        raw = options.get('day')
        if raw:
            day = parse_date(raw)
            if day is None:
                raise CommandError(f"Invalid date: {raw}")
        else:
            day = timezone.localdate() - timedelta(days=1)

        count = AnalyticsService.snapshot_all(day)
        self.stdout.write(self.style.SUCCESS(f"Snapshotted {count} users for {day.isoformat()}"))
