from datetime import timedelta

from django.contrib.auth.models import AbstractUser
from django.db import models
from django.conf import settings
from django.utils import timezone


class Role(models.Model):
    """User roles for capability-based access control.

    Standard roles: patient, provider, nurse, pharmacy, admin
    """

    PATIENT = 'patient'
    PROVIDER = 'provider'
    NURSE = 'nurse'
    PHARMACY = 'pharmacy'
    ADMIN = 'admin'

    name = models.CharField(max_length=64, unique=True, db_index=True)
    label = models.CharField(max_length=128)

    class Meta:
        db_table = 'core_role'
        ordering = ['name']
        verbose_name = 'Role'
        verbose_name_plural = 'Roles'

    def __str__(self) -> str:
        return self.label


class User(AbstractUser):
    """Custom User model with role-based access control.

    Extends Django's AbstractUser with:
    - role: ForeignKey to Role (no role means "unverified")
    - phone: optional contact number
    - email: made unique (magic links and passkeys are keyed by email)
    """

    email = models.EmailField('email address', blank=True, unique=True)
    phone = models.CharField(max_length=32, blank=True, default='')
    role = models.ForeignKey(
        Role,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name='users',
    )

    class Meta:
        db_table = 'core_user'
        ordering = ['username']
        verbose_name = 'User'
        verbose_name_plural = 'Users'

    @property
    def role_name(self) -> str | None:
        role = self.role
        return role.name if role is not None else None


class AuditLog(models.Model):
    """Append-only admin audit trail.

    Records who (actor) did what (action) to which entity. entity_id is a
    string so any primary key or external identifier fits.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='audit_logs',
    )
    actor_email = models.CharField(max_length=254, blank=True, default='', db_index=True)
    role_name = models.CharField(max_length=50, blank=True, default='', db_index=True)
    action = models.CharField(max_length=64, db_index=True)
    entity_type = models.CharField(max_length=64)
    entity_id = models.CharField(max_length=64, blank=True, default='')
    changes = models.JSONField(null=True, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    timestamp = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = 'core_auditlog'
        ordering = ['-timestamp', '-id']
        verbose_name = 'Audit Log'
        verbose_name_plural = 'Audit Logs'
        indexes = [
            models.Index(fields=['entity_type', 'entity_id'], name='core_audit_entity_idx'),
            models.Index(fields=['actor_email', 'timestamp'], name='core_audit_actor_idx'),
            models.Index(fields=['action', 'timestamp'], name='core_audit_action_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.timestamp} {self.action} {self.entity_type}:{self.entity_id}"


class RateLimit(models.Model):
    """Fixed-window request counter for one key."""

    key = models.CharField(max_length=255, unique=True)
    count = models.PositiveIntegerField(default=0)
    window_start = models.DateTimeField()
    window_seconds = models.PositiveIntegerField()

    class Meta:
        db_table = 'core_ratelimit'
        ordering = ['key']

    def __str__(self) -> str:
        return f"RateLimit {self.key} count={self.count}"

    @property
    def reset_at(self):
        return self.window_start + timedelta(seconds=self.window_seconds)

    def is_expired(self, now=None) -> bool:
        now = now or timezone.now()
        return self.reset_at < now


class MagicLinkCode(models.Model):
    """Six-digit email verification code (single use, time-boxed)."""

    email = models.EmailField(db_index=True)
    code = models.CharField(max_length=6)
    expires_at = models.DateTimeField()
    consumed = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = 'core_magiclinkcode'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['email', 'code'], name='core_magic_email_code_idx'),
        ]

    def __str__(self) -> str:
        return f"MagicLinkCode {self.email} consumed={self.consumed}"


class AuthChallenge(models.Model):
    """Passkey challenge waiting to be answered by the browser."""

    TYPE_REGISTRATION = 'registration'
    TYPE_AUTHENTICATION = 'authentication'

    TYPE_CHOICES = [
        (TYPE_REGISTRATION, 'Registration'),
        (TYPE_AUTHENTICATION, 'Authentication'),
    ]

    challenge = models.CharField(max_length=128, unique=True)
    email = models.EmailField(blank=True, default='')
    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    rate_limit_key = models.CharField(max_length=255, blank=True, default='', db_index=True)
    expires_at = models.DateTimeField()
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'core_authchallenge'
        ordering = ['-created_at', '-id']

    def __str__(self) -> str:
        return f"AuthChallenge {self.type} {self.email or '-'}"


class Passkey(models.Model):
    """Public-key credential registered from a browser.

    Only the public key is stored; the private key stays on the device.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='passkeys',
    )
    email = models.EmailField(db_index=True)
    credential_id = models.CharField(max_length=512, unique=True)
    public_key = models.TextField()
    counter = models.PositiveIntegerField(default=0)
    device_type = models.CharField(max_length=64, blank=True, default='')
    backed_up = models.BooleanField(default=False)
    transports = models.JSONField(default=list, blank=True)
    login_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    last_used_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'core_passkey'
        ordering = ['-created_at', '-id']

    def __str__(self) -> str:
        return f"Passkey {self.email} ({self.device_type or 'unknown'})"
