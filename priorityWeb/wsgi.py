"""
WSGI config for the Daily Priority API.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'priorityWeb.settings')

application = get_wsgi_application()
