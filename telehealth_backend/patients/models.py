from django.conf import settings
from django.db import models


class Patient(models.Model):
    """Clinical profile attached to a patient account."""

    ID_PENDING = 'pending'
    ID_VERIFIED = 'verified'
    ID_REJECTED = 'rejected'

    ID_VERIFICATION_CHOICES = [
        (ID_PENDING, 'Pending'),
        (ID_VERIFIED, 'Verified'),
        (ID_REJECTED, 'Rejected'),
    ]

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='patient_profile',
    )
    email = models.EmailField(db_index=True)
    date_of_birth = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=32, blank=True, default='')
    street = models.CharField(max_length=255, blank=True, default='')
    city = models.CharField(max_length=128, blank=True, default='')
    state = models.CharField(max_length=2, blank=True, default='', db_index=True)
    zip_code = models.CharField(max_length=10, blank=True, default='')
    insurance_provider = models.CharField(max_length=255, blank=True, default='')
    insurance_policy_number = models.CharField(max_length=64, blank=True, default='')
    insurance_group_number = models.CharField(max_length=64, blank=True, default='')
    primary_pharmacy = models.ForeignKey(
        'pharmacies.Pharmacy',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='patients',
    )
    allergies = models.JSONField(default=list, blank=True)
    current_medications = models.JSONField(default=list, blank=True)
    medical_conditions = models.JSONField(default=list, blank=True)
    emergency_contact = models.JSONField(null=True, blank=True)
    consent_signed_at = models.DateTimeField(null=True, blank=True)
    id_verification_status = models.CharField(
        max_length=16,
        choices=ID_VERIFICATION_CHOICES,
        default=ID_PENDING,
    )
    id_verified_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'patients_patient'
        ordering = ['-created_at', '-id']

    def __str__(self) -> str:
        name = self.display_name
        return f"{name} <{self.email}>" if name else self.email

    @property
    def display_name(self) -> str:
        user = self.user
        return f"{user.first_name} {user.last_name}".strip()

    @property
    def initials(self) -> str:
        user = self.user
        parts = [p for p in (user.first_name, user.last_name) if p]
        if parts:
            return ''.join(p[0].upper() for p in parts)
        return (self.email[:1] or '?').upper()
