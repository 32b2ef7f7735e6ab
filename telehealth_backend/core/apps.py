"""
Core App Configuration
"""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Users, roles, audit log, rate limits, magic links and passkeys."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'telehealth_backend.core'
    verbose_name = 'Core (Users & Access)'
