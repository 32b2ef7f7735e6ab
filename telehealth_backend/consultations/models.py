from django.db import models


class Consultation(models.Model):
    """A telehealth visit between a patient and (eventually) a provider.

    provider stays empty while the consultation sits in the waiting room.
    cost is in cents.
    """

    TYPE_VIDEO = 'video'
    TYPE_PHONE = 'phone'
    TYPE_CHAT = 'chat'

    TYPE_CHOICES = [
        (TYPE_VIDEO, 'Video'),
        (TYPE_PHONE, 'Phone'),
        (TYPE_CHAT, 'Chat'),
    ]

    STATUS_SCHEDULED = 'scheduled'
    STATUS_WAITING = 'waiting'
    STATUS_ASSIGNED = 'assigned'
    STATUS_IN_PROGRESS = 'in_progress'
    STATUS_COMPLETED = 'completed'
    STATUS_CANCELLED = 'cancelled'
    STATUS_NO_SHOW = 'no_show'

    STATUS_CHOICES = [
        (STATUS_SCHEDULED, 'Scheduled'),
        (STATUS_WAITING, 'Waiting'),
        (STATUS_ASSIGNED, 'Assigned'),
        (STATUS_IN_PROGRESS, 'In progress'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CANCELLED, 'Cancelled'),
        (STATUS_NO_SHOW, 'No show'),
    ]

    ACTIVE_STATUSES = (STATUS_WAITING, STATUS_IN_PROGRESS, STATUS_SCHEDULED)

    PAYMENT_PENDING = 'pending'
    PAYMENT_PAID = 'paid'
    PAYMENT_INSURANCE = 'insurance'
    PAYMENT_WAIVED = 'waived'

    PAYMENT_CHOICES = [
        (PAYMENT_PENDING, 'Pending'),
        (PAYMENT_PAID, 'Paid'),
        (PAYMENT_INSURANCE, 'Insurance'),
        (PAYMENT_WAIVED, 'Waived'),
    ]

    patient = models.ForeignKey(
        'patients.Patient',
        on_delete=models.CASCADE,
        related_name='consultations',
    )
    provider = models.ForeignKey(
        'providers.Provider',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='consultations',
    )
    intake = models.ForeignKey(
        'intake.Intake',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='consultations',
    )
    type = models.CharField(max_length=8, choices=TYPE_CHOICES, default=TYPE_VIDEO)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_SCHEDULED, db_index=True)
    scheduled_at = models.DateTimeField(null=True, blank=True)
    started_at = models.DateTimeField(null=True, blank=True)
    ended_at = models.DateTimeField(null=True, blank=True)
    duration_minutes = models.PositiveIntegerField(null=True, blank=True)
    room_url = models.URLField(max_length=500, blank=True, default='')
    room_token = models.TextField(blank=True, default='')
    chief_complaint = models.TextField(blank=True, default='')
    notes = models.TextField(blank=True, default='')
    diagnosis = models.TextField(blank=True, default='')
    diagnosis_codes = models.JSONField(default=list, blank=True)
    treatment_plan = models.TextField(blank=True, default='')
    follow_up_required = models.BooleanField(default=False)
    follow_up_date = models.DateTimeField(null=True, blank=True)
    recording = models.CharField(max_length=500, blank=True, default='')
    patient_state = models.CharField(max_length=2, blank=True, default='')
    cost = models.PositiveIntegerField(default=0)
    payment_status = models.CharField(max_length=16, choices=PAYMENT_CHOICES, default=PAYMENT_PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'consultations_consultation'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['status', 'created_at'], name='consult_status_created_idx'),
        ]

    def __str__(self) -> str:
        return f"Consultation #{self.pk} ({self.status})"
