"""WSGI entry point for the telehealth portal backend."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'telehealth_backend.settings')

application = get_wsgi_application()
