from django.db import models


class Prescription(models.Model):
    """Medication order written during a consultation."""

    STATUS_DRAFT = 'draft'
    STATUS_PENDING_REVIEW = 'pending_review'
    STATUS_SIGNED = 'signed'
    STATUS_SENT = 'sent'
    STATUS_FILLING = 'filling'
    STATUS_READY = 'ready'
    STATUS_PICKED_UP = 'picked_up'
    STATUS_DELIVERED = 'delivered'
    STATUS_CANCELLED = 'cancelled'

    STATUS_CHOICES = [
        (STATUS_DRAFT, 'Draft'),
        (STATUS_PENDING_REVIEW, 'Pending review'),
        (STATUS_SIGNED, 'Signed'),
        (STATUS_SENT, 'Sent'),
        (STATUS_FILLING, 'Filling'),
        (STATUS_READY, 'Ready'),
        (STATUS_PICKED_UP, 'Picked up'),
        (STATUS_DELIVERED, 'Delivered'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]

    FILLED_STATUSES = (STATUS_READY, STATUS_PICKED_UP, STATUS_DELIVERED)

    consultation = models.ForeignKey(
        'consultations.Consultation',
        on_delete=models.PROTECT,
        related_name='prescriptions',
    )
    patient = models.ForeignKey(
        'patients.Patient',
        on_delete=models.PROTECT,
        related_name='prescriptions',
    )
    provider = models.ForeignKey(
        'providers.Provider',
        on_delete=models.PROTECT,
        related_name='prescriptions',
    )
    pharmacy = models.ForeignKey(
        'pharmacies.Pharmacy',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='prescriptions',
    )
    medication_name = models.CharField(max_length=255)
    generic_name = models.CharField(max_length=255, blank=True, default='')
    ndc = models.CharField(max_length=32, blank=True, default='')
    dosage = models.CharField(max_length=128)
    form = models.CharField(max_length=64)
    quantity = models.PositiveIntegerField()
    days_supply = models.PositiveIntegerField()
    refills_authorized = models.PositiveIntegerField(default=0)
    refills_used = models.PositiveIntegerField(default=0)
    directions = models.TextField()
    dea_schedule = models.CharField(max_length=8, blank=True, default='')
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_DRAFT, db_index=True)
    e_prescribe_id = models.CharField(max_length=128, blank=True, default='')
    sent_to_pharmacy_at = models.DateTimeField(null=True, blank=True)
    filled_at = models.DateTimeField(null=True, blank=True)
    expires_at = models.DateTimeField()
    next_refill_date = models.DateTimeField(null=True, blank=True)
    prior_auth_required = models.BooleanField(default=False)
    prior_auth_status = models.CharField(max_length=16, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'prescriptions_prescription'
        ordering = ['-created_at', '-id']

    def __str__(self) -> str:
        return f"{self.medication_name} {self.dosage} (#{self.pk})"

    @property
    def refills_remaining(self) -> int:
        return max(0, self.refills_authorized - self.refills_used)


class RefillRequest(models.Model):
    STATUS_REQUESTED = 'requested'
    STATUS_APPROVED = 'approved'
    STATUS_DENIED = 'denied'
    STATUS_FILLING = 'filling'
    STATUS_READY = 'ready'

    STATUS_CHOICES = [
        (STATUS_REQUESTED, 'Requested'),
        (STATUS_APPROVED, 'Approved'),
        (STATUS_DENIED, 'Denied'),
        (STATUS_FILLING, 'Filling'),
        (STATUS_READY, 'Ready'),
    ]

    prescription = models.ForeignKey(Prescription, on_delete=models.CASCADE, related_name='refill_requests')
    patient = models.ForeignKey('patients.Patient', on_delete=models.CASCADE, related_name='refill_requests')
    pharmacy = models.ForeignKey(
        'pharmacies.Pharmacy',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='refill_requests',
    )
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_REQUESTED, db_index=True)
    requested_at = models.DateTimeField(auto_now_add=True)
    processed_at = models.DateTimeField(null=True, blank=True)
    processed_by = models.ForeignKey(
        'providers.Provider',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='processed_refills',
    )
    denial_reason = models.TextField(blank=True, default='')

    class Meta:
        db_table = 'prescriptions_refill_request'
        ordering = ['-requested_at', '-id']

    def __str__(self) -> str:
        return f"Refill #{self.pk} for Rx #{self.prescription_id} ({self.status})"


class FaxLog(models.Model):
    """One attempt to fax a prescription to a pharmacy."""

    STATUS_QUEUED = 'queued'
    STATUS_SENDING = 'sending'
    STATUS_SENT = 'sent'
    STATUS_FAILED = 'failed'
    STATUS_CONFIRMED = 'confirmed'

    STATUS_CHOICES = [
        (STATUS_QUEUED, 'Queued'),
        (STATUS_SENDING, 'Sending'),
        (STATUS_SENT, 'Sent'),
        (STATUS_FAILED, 'Failed'),
        (STATUS_CONFIRMED, 'Confirmed'),
    ]

    prescription = models.ForeignKey(Prescription, on_delete=models.CASCADE, related_name='fax_logs')
    pharmacy = models.ForeignKey('pharmacies.Pharmacy', on_delete=models.CASCADE, related_name='fax_logs')
    fax_number = models.CharField(max_length=32)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_QUEUED, db_index=True)
    provider_fax_id = models.CharField(max_length=64, blank=True, default='')
    pages = models.PositiveIntegerField(null=True, blank=True)
    error_message = models.TextField(blank=True, default='')
    attempts = models.PositiveIntegerField(default=0)
    sent_at = models.DateTimeField(null=True, blank=True)
    confirmed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'prescriptions_fax_log'
        ordering = ['-created_at', '-id']

    def __str__(self) -> str:
        return f"Fax #{self.pk} to {self.fax_number} ({self.status})"
