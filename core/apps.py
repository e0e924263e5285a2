from django.apps import AppConfig
from django.conf import settings
import sys


class CoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core"

    def ready(self):
        # Only the serving process runs background jobs; tests and other
        # management commands never start the scheduler.
        if 'runserver' in sys.argv and getattr(settings, 'ENABLE_SCHEDULER', False):
            from core.integrations import scheduler
            scheduler.start_scheduler()
