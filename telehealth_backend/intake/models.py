from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class Intake(models.Model):
    """Multi-step onboarding form a patient fills in before a consultation."""

    STATUS_DRAFT = 'draft'
    STATUS_IN_PROGRESS = 'in_progress'
    STATUS_COMPLETED = 'completed'
    STATUS_EXPIRED = 'expired'

    STATUS_CHOICES = [
        (STATUS_DRAFT, 'Draft'),
        (STATUS_IN_PROGRESS, 'In progress'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_EXPIRED, 'Expired'),
    ]

    OPEN_STATUSES = (STATUS_DRAFT, STATUS_IN_PROGRESS)

    patient = models.ForeignKey(
        'patients.Patient',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='intakes',
    )
    email = models.EmailField(db_index=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_DRAFT, db_index=True)
    medical_history = models.JSONField(null=True, blank=True)
    current_symptoms = models.JSONField(null=True, blank=True)
    medications = models.JSONField(null=True, blank=True)
    allergies = models.JSONField(null=True, blank=True)
    chief_complaint = models.TextField(blank=True, default='')
    symptom_duration = models.CharField(max_length=128, blank=True, default='')
    severity_level = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(10)],
    )
    vital_signs = models.JSONField(null=True, blank=True)
    id_verified = models.BooleanField(default=False)
    consent_given = models.BooleanField(default=False)
    completed_steps = models.JSONField(default=list, blank=True)
    triage_result = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'intake_intake'
        ordering = ['-created_at', '-id']

    def __str__(self) -> str:
        return f"Intake #{self.pk} {self.email} ({self.status})"
