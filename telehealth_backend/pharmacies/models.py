from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class Pharmacy(models.Model):
    """Dispensing pharmacy that receives prescriptions."""

    TYPE_RETAIL = 'retail'
    TYPE_COMPOUNDING = 'compounding'
    TYPE_MAIL_ORDER = 'mail_order'
    TYPE_SPECIALTY = 'specialty'

    TYPE_CHOICES = [
        (TYPE_RETAIL, 'Retail'),
        (TYPE_COMPOUNDING, 'Compounding'),
        (TYPE_MAIL_ORDER, 'Mail order'),
        (TYPE_SPECIALTY, 'Specialty'),
    ]

    STATUS_ACTIVE = 'active'
    STATUS_INACTIVE = 'inactive'
    STATUS_SUSPENDED = 'suspended'

    STATUS_CHOICES = [
        (STATUS_ACTIVE, 'Active'),
        (STATUS_INACTIVE, 'Inactive'),
        (STATUS_SUSPENDED, 'Suspended'),
    ]

    name = models.CharField(max_length=255)
    ncpdp_id = models.CharField(max_length=32, blank=True, default='')
    npi_number = models.CharField(max_length=10, blank=True, default='', db_index=True)
    street = models.CharField(max_length=255, blank=True, default='')
    city = models.CharField(max_length=128, blank=True, default='')
    state = models.CharField(max_length=2, blank=True, default='', db_index=True)
    zip_code = models.CharField(max_length=10, blank=True, default='')
    phone = models.CharField(max_length=32, blank=True, default='')
    fax = models.CharField(max_length=32, blank=True, default='')
    email = models.EmailField(blank=True, default='')
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default=TYPE_RETAIL)
    accepts_e_prescribe = models.BooleanField(default=False)
    capabilities = models.JSONField(default=list, blank=True)
    tier = models.PositiveSmallIntegerField(
        default=3,
        validators=[MinValueValidator(1), MaxValueValidator(5)],
    )
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_ACTIVE, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'pharmacies_pharmacy'
        ordering = ['name', 'id']
        verbose_name_plural = 'Pharmacies'

    def __str__(self) -> str:
        return f"{self.name} ({self.city}, {self.state})" if self.city else self.name
