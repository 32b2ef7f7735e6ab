from django.conf import settings
from django.db import models


class Provider(models.Model):
    """Licensed clinician who runs consultations and writes prescriptions.

    consultation_rate is in cents. licensed_states holds two-letter codes.
    """

    TITLE_CHOICES = [
        ('MD', 'MD'),
        ('DO', 'DO'),
        ('PA', 'PA'),
        ('NP', 'NP'),
        ('APRN', 'APRN'),
    ]

    STATUS_ONBOARDING = 'onboarding'
    STATUS_ACTIVE = 'active'
    STATUS_INACTIVE = 'inactive'
    STATUS_SUSPENDED = 'suspended'

    STATUS_CHOICES = [
        (STATUS_ONBOARDING, 'Onboarding'),
        (STATUS_ACTIVE, 'Active'),
        (STATUS_INACTIVE, 'Inactive'),
        (STATUS_SUSPENDED, 'Suspended'),
    ]

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='provider_profile',
    )
    email = models.EmailField(db_index=True)
    first_name = models.CharField(max_length=150)
    last_name = models.CharField(max_length=150)
    title = models.CharField(max_length=8, choices=TITLE_CHOICES)
    npi_number = models.CharField(max_length=10, unique=True)
    dea_number = models.CharField(max_length=16, blank=True, default='')
    specialties = models.JSONField(default=list, blank=True)
    licensed_states = models.JSONField(default=list, blank=True)
    availability = models.JSONField(null=True, blank=True)
    accepting_patients = models.BooleanField(default=True)
    consultation_rate = models.PositiveIntegerField(default=0)
    max_daily_consultations = models.PositiveIntegerField(default=20)
    current_queue_size = models.PositiveIntegerField(default=0)
    total_consultations = models.PositiveIntegerField(default=0)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_ONBOARDING, db_index=True)
    credential_verified_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'providers_provider'
        ordering = ['last_name', 'first_name', 'id']

    def __str__(self) -> str:
        return self.display_name

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}, {self.title}"

    def is_licensed_in(self, state: str) -> bool:
        state = (state or '').upper()
        return state in [s.upper() for s in (self.licensed_states or [])]
