from django.apps import AppConfig


class ConsultationsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'telehealth_backend.consultations'
    verbose_name = 'Consultations'
