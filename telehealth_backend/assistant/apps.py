from django.apps import AppConfig


class AssistantConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'telehealth_backend.assistant'
    verbose_name = 'AI assistant'
